"""Test module for the `sigbridge_cli` package"""

from click.testing import CliRunner

from sigbridge_cli import cli

runner = CliRunner()
invoke_cli = lambda *a, **kw: runner.invoke(cli, *a, **kw)
