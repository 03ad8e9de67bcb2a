"""Module that coordinates sigbridge's persistent config directory and the
loading of bridge configurations"""

import copy
import logging
import os

from dantro.tools import recursive_update

from ._yaml import load_yml, write_yml
from .schema import BridgeConfig, parse_bridge_cfg

log = logging.getLogger(__name__)

# Some globally relevant variables --------------------------------------------

SIGBRIDGE_CFG_DIR = os.path.expanduser("~/.config/sigbridge")
"""Path to the persistent sigbridge configuration directory"""

SIGBRIDGE_CFG_FILE_NAMES = dict(
    signals="signals_cfg.yml",
)
"""Names and paths of valid configuration entries"""

SIGBRIDGE_CFG_FILE_PATHS = {
    k: os.path.join(SIGBRIDGE_CFG_DIR, fname)
    for k, fname in SIGBRIDGE_CFG_FILE_NAMES.items()
}
"""Absolute configuration file paths"""

BASE_CFG_PATH = os.path.join(os.path.dirname(__file__), "cfg", "base_cfg.yml")
"""The base configuration shipped with the package"""


# -----------------------------------------------------------------------------


def get_cfg_path(cfg_name: str) -> str:
    """Returns the absolute path to the specified configuration file"""
    try:
        return SIGBRIDGE_CFG_FILE_PATHS[cfg_name]

    except KeyError as err:
        _avail = ", ".join(SIGBRIDGE_CFG_FILE_NAMES.keys())
        raise ValueError(
            f"No configuration entry '{cfg_name}' available! "
            f"Possible keys: {_avail}"
        ) from err


def load_from_cfg_dir(cfg_name: str) -> dict:
    """Load a configuration file; returns empty dict if no file exists.

    Args:
        cfg_name (str): The name of the configuration to read

    Returns:
        dict: The configuration as read from the config directory; if no file
            is available, will return an empty dict.
    """
    cfg_fpath = get_cfg_path(cfg_name)
    try:
        d = load_yml(cfg_fpath)

    except FileNotFoundError:
        log.debug(
            "No '%s' configuration file exists at %s ! Returning empty.",
            cfg_name,
            cfg_fpath,
        )
        return dict()

    # If the yaml object is None for whatever reason, return an empty dict
    if d is None:
        return dict()
    return d


def write_to_cfg_dir(cfg_name: str, obj: dict):
    """Writes a YAML represetation of the given object to the configuration
    directory. Always overwrites a possibly existing file.

    Args:
        cfg_name (str): The configuration name
        obj (dict): The yaml-representable object that is to be written;
            usually a dict.
    """
    fpath = get_cfg_path(cfg_name)
    os.makedirs(os.path.dirname(fpath), exist_ok=True)
    write_yml(obj, path=fpath)


def load_bridge_cfg(*, use_user_cfg: bool = True, **update) -> BridgeConfig:
    """Assembles a bridge configuration from the base configuration, the user
    configuration, and the given updates, in that order.

    Args:
        use_user_cfg (bool, optional): Whether to include the ``signals``
            user configuration
        **update: Recursively updates the assembled configuration

    Returns:
        BridgeConfig: The validated configuration
    """
    cfg = load_yml(BASE_CFG_PATH)

    if use_user_cfg:
        cfg = recursive_update(cfg, load_from_cfg_dir("signals"))

    cfg = recursive_update(cfg, copy.deepcopy(update))
    return parse_bridge_cfg(cfg)
