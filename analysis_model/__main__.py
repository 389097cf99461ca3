from analysis_model.cli import cli

cli(obj={})
