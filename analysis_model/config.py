"""Configuration loading and validation for the command line tool.

Usage:
    config = load("analysis-config.yaml")       # raises ConfigError on bad config
    config.properties                           # ["severity", "fileName"]
    generate_template("analysis-config.yaml")   # writes example file to disk
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from analysis_model import properties as issue_properties
from analysis_model.errors import UnknownPropertyError

DEFAULT_PROPERTIES = ["severity", "fileName"]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    properties: list[str] = field(default_factory=lambda: list(DEFAULT_PROPERTIES))
    pretty: bool = False
    # Stamped on merged reports when no input carries an origin
    origin: str | None = None


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = "analysis-config.yaml") -> Config:
    """Load and validate configuration from a YAML file.

    Environment variables ANALYSIS_MODEL_PROPERTIES (comma-separated) and
    ANALYSIS_MODEL_ORIGIN override file values.

    Raises:
        ConfigError: if the file is missing, malformed, or lists unknown
                     properties.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `analysis-model init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    summary = raw.get("summary") or {}
    env_properties = os.environ.get("ANALYSIS_MODEL_PROPERTIES")
    if env_properties:
        props = [p.strip() for p in env_properties.split(",") if p.strip()]
    else:
        props = summary.get("properties", DEFAULT_PROPERTIES)
    origin = os.environ.get("ANALYSIS_MODEL_ORIGIN") or raw.get("origin")

    if not isinstance(props, list):
        raise ConfigError("Invalid configuration:\n  - 'summary.properties' must be a list")

    config = Config(
        properties=[str(p) for p in props],
        pretty=bool(raw.get("pretty", False)),
        origin=str(origin).strip() if origin else None,
    )
    _validate(config)
    return config


def _validate(config: Config) -> None:
    """Raise ConfigError if a field holds an unusable value."""
    errors: list[str] = []

    for name in config.properties:
        try:
            issue_properties.resolve(name)
        except UnknownPropertyError:
            errors.append(f"  - 'summary.properties' contains unknown property '{name}'")
    if config.origin == "":
        errors.append("  - 'origin' must not be empty")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
# Pretty-print JSON output
pretty: false

# Origin stamped on merged reports whose inputs carry none
# origin: "checkstyle"

summary:
  # Properties counted by `analysis-model summary`. Available:
  # fileName, packageName, moduleName, category, type, origin, message, severity
  properties:
    - severity
    - fileName
"""


def generate_template(output_path: str = "analysis-config.yaml") -> None:
    """Write a template analysis-config.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
