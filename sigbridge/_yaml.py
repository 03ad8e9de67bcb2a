"""Supplies basic YAML interface, inherited from dantro"""

from dantro.tools import load_yml, write_yml
