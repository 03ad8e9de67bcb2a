"""Defines the sigbridge CLI"""

import click

from .config import config
from .signals import signals
from .watch import watch

SUBCOMMANDS = [
    signals,
    watch,
    config,
]

cli = click.Group(
    help=(
        "**sigbridge**: turn operating system signals into log records\n\n"
        "Inspect the signal dispositions of a process, watch signals arrive "
        "and log them, and show the configuration that is used when "
        "attaching signal loggers."
    ),
)

for subcommand in SUBCOMMANDS:
    cli.add_command(subcommand)
