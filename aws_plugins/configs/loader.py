"""Load plugin defaults from a YAML file.

The file is named by ``--config`` or the ``AWS_PLUGINS_CONFIG`` environment
variable. Without either, no defaults apply.
"""

import logging
import os
from pathlib import Path

import yaml

from aws_plugins.configs.schema.validator import validate_plugin_config

logger = logging.getLogger(__name__)

CONFIG_ENV = "AWS_PLUGINS_CONFIG"


def _resolve_path(path=None):
    path = path or os.environ.get(CONFIG_ENV)
    if not path:
        return None
    return Path(path).expanduser()


def load_plugin_config(path=None, known_checks=None):
    config_path = _resolve_path(path)
    if config_path is None:
        return {"defaults": {}, "checks": {}}

    if not config_path.exists():
        raise FileNotFoundError(f"plugin config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    logger.debug("Loaded plugin config from %s", config_path)
    return validate_plugin_config(raw, known_checks)


def defaults_for(config, check_name):
    """Merge the shared defaults with the options of *check_name*."""
    merged = dict(config.get("defaults", {}))
    merged.update(config.get("checks", {}).get(check_name, {}))
    return merged
