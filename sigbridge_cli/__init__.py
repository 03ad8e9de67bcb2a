"""The sigbridge command line interface"""

from .cli import cli
