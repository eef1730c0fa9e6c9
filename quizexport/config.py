"""
Configuration loading.

Settings live in a YAML file (config.yaml by default). Values from the file
are merged over DEFAULT_CONFIG, so a partial file only overrides what it
names and a missing file yields the defaults.
"""

import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

DEFAULT_CONFIG = {
    "export": {
        "default_format": "PDF_PRINT",
        "output_dir": ".",
        "scope": "me",
        "default_print_options": "compact",
    },
    "pdf": {
        "page_size": "letter",
        "margin": 50,
        "line_spacing": 1.2,
        "question_spacing": 20,
        "title_font_size": 18,
        "heading_font_size": 14,
        "normal_font_size": 11,
        "small_font_size": 9,
    },
    "tabular": {
        "max_choice_columns": 5,
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from a YAML file merged over the defaults.

    Args:
        path: Path to the YAML file. A missing file is not an error.

    Returns:
        The merged configuration dict.

    Raises:
        ValueError: If the file does not contain a YAML mapping.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not path or not os.path.exists(path):
        logger.debug("load_config: %s not found, using defaults", path)
        return config

    with open(path, encoding="utf-8") as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return _merge(config, loaded)
