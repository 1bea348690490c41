"""
Runtime utilities

- setup_logging(): load config/logging.yml, falling back to basic logging
- get_project_root(): repository root (parent of the genereport package)
"""
from __future__ import annotations

import logging
import logging.config
import os

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from genereport.settings import settings


def get_project_root() -> str:
    here = os.path.dirname(__file__)
    return os.path.abspath(os.path.join(here, ".."))


def setup_logging(config_rel_path: str = os.path.join("config", "logging.yml")) -> None:
    """Initialize logging.

    - If `config/logging.yml` exists under the project root, configure logging from it.
    - Otherwise, or if the file cannot be applied, fall back to basicConfig at settings.log_level.

    Args:
        config_rel_path: logging YAML path relative to the project root.
    """
    cfg_path = os.path.join(get_project_root(), config_rel_path)
    if os.path.exists(cfg_path):
        try:
            yaml = YAML(typ="safe")
            with open(cfg_path, "r", encoding="utf-8") as f:
                data = yaml.load(f) or {}
            if isinstance(data, dict) and data:
                logging.config.dictConfig(data)
                logging.getLogger("genereport").setLevel(settings.log_level.upper())
                return
        except (OSError, ValueError, TypeError, YAMLError) as e:
            logging.basicConfig(level=settings.log_level.upper())
            logging.getLogger(__name__).warning("Could not apply %s: %s", cfg_path, e)
            return
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
