"""CLI entry point: command definitions using Click.

Commands:
    init      Generate a template config file
    summary   Sizes, priorities and property counts of merged reports
    group     Partition merged reports by one property
    merge     Merge reports into a single JSON report
"""

import json
import logging
import sys
from typing import Any

import click

from analysis_model import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Return the configuration selected by --config. Exits on error."""
    from analysis_model.config import Config, ConfigError, load

    config_path = ctx.obj["config_path"]
    if config_path is None:
        return Config()
    try:
        return load(config_path)
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


def _read_reports(ctx: click.Context, paths: tuple[str, ...]):
    """Merge the JSON reports at *paths*; the first one with provenance wins."""
    from analysis_model.errors import SerializationError
    from analysis_model.report import Report
    from analysis_model.serialization import loads

    config = ctx.obj["config"]
    merged = Report()
    for path in paths:
        logger.debug("Reading report '%s'", path)
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as exc:
            raise SerializationError(f"'{path}' is not UTF-8 encoded: {exc}") from exc
        merged.add_all(loads(text))
    if config.origin and not merged.has_origin:
        merged.origin = config.origin
    logger.debug("Merged %d reports: %r", len(paths), merged)
    return merged


def _emit(text: str, ctx: click.Context) -> None:
    """Write text to stdout or to the file specified by --output."""
    output_path: str | None = ctx.obj["output_path"]
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Report written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _emit_json(data: Any, ctx: click.Context) -> None:
    indent = 2 if _pretty(ctx) else None
    _emit(json.dumps(data, indent=indent, ensure_ascii=False), ctx)


def _pretty(ctx: click.Context) -> bool:
    return ctx.obj["pretty"] or ctx.obj["config"].pretty


def _handle_model_errors(func):
    """Decorator that catches analysis model exceptions and exits cleanly."""
    import functools

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from analysis_model.errors import (
            AnalysisModelError,
            SerializationError,
            UnknownPropertyError,
        )

        try:
            return func(*args, **kwargs)
        except UnknownPropertyError as exc:
            click.echo(f"Property error: {exc}", err=True)
            sys.exit(1)
        except SerializationError as exc:
            click.echo(f"Invalid report: {exc}", err=True)
            sys.exit(1)
        except AnalysisModelError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to the configuration file.")
@click.option("--output", "output_path", default=None,
              help="Write output to a file instead of stdout.")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print the JSON output.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="analysis-model")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, output_path: str | None,
        pretty: bool, verbose: bool) -> None:
    """Analysis model: merge, summarise and group issue reports."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["output_path"] = output_path
    ctx.obj["pretty"] = pretty
    ctx.obj["verbose"] = verbose
    if ctx.invoked_subcommand != "init":
        ctx.obj["config"] = _load_config(ctx)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="analysis-config.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template analysis-config.yaml file."""
    from analysis_model.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it to choose the properties summarised by default.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# summary
# ---------------------------------------------------------------------------

@cli.command("summary")
@click.argument("reports", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--property", "property_names", multiple=True,
              help="Property to count (repeatable). Defaults to the configured list.")
@click.pass_context
@_handle_model_errors
def summary_command(ctx: click.Context, reports: tuple[str, ...],
                    property_names: tuple[str, ...]) -> None:
    """Sizes, priorities and property counts of the merged REPORTS."""
    from analysis_model import properties

    report = _read_reports(ctx, reports)
    names = property_names or tuple(ctx.obj["config"].properties)

    counts = {
        properties.canonical_name(name): report.get_property_count(properties.resolve(name))
        for name in names
    }
    _emit_json({
        "origin":     report.origin,
        "reference":  report.reference,
        "size":       report.size(),
        "duplicates": report.duplicates_size,
        "priorities": report.get_priorities()._asdict(),
        "properties": counts,
        "errors":     list(report.error_messages),
    }, ctx)


# ---------------------------------------------------------------------------
# group
# ---------------------------------------------------------------------------

@cli.command("group")
@click.argument("reports", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--by", "property_name", default="severity", show_default=True,
              help="Property used to partition the issues.")
@click.pass_context
@_handle_model_errors
def group_command(ctx: click.Context, reports: tuple[str, ...], property_name: str) -> None:
    """Partition the merged REPORTS by one property."""
    report = _read_reports(ctx, reports)
    groups = report.group_by_property(property_name)

    _emit_json({
        value: {
            "size":     group.size(),
            "messages": [issue.message for issue in group],
        }
        for value, group in groups.items()
    }, ctx)


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------

@cli.command("merge")
@click.argument("reports", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@_handle_model_errors
def merge_command(ctx: click.Context, reports: tuple[str, ...]) -> None:
    """Merge REPORTS into a single report (first provenance wins)."""
    from analysis_model.serialization import dumps

    report = _read_reports(ctx, reports)
    _emit(dumps(report, pretty=_pretty(ctx)), ctx)
