"""
Configuration loading.

Defaults live in default.yaml next to this module. A YAML file passed with
--config overrides any subset of them.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'default.yaml'


def _read_mapping(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path) as f:
        loaded = yaml.safe_load(f)

    # An empty file loads as None
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(loaded).__name__}")
    return loaded


DEFAULT_CONFIG: Dict[str, Any] = _read_mapping(DEFAULT_CONFIG_PATH)


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Return DEFAULT_CONFIG updated with the contents of a YAML file.

    Parameters
    ----------
    path : str or Path, optional
        Config file. None gives the defaults.

    Raises
    ------
    ValueError
        The document is not a mapping, or has keys not in DEFAULT_CONFIG.
    """
    config = dict(DEFAULT_CONFIG)
    if path is None:
        return config

    loaded = _read_mapping(path)
    unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"{path}: unknown config keys: {', '.join(map(str, unknown))}")

    config.update(loaded)
    return config
