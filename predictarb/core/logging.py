"""
Logging setup for predictarb.

Log lines go to stderr so the rendered cycle table on stdout stays clean.
config/logging.yaml is used when present; outside the local environment
its console formatter is swapped for JSON lines.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from predictarb.core.config import find_project_root

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_config_path() -> Optional[Path]:
    root = find_project_root()
    return root / "config" / "logging.yaml" if root is not None else None


def _prepare_dict_config(config: dict[str, Any], json_lines: bool) -> dict[str, Any]:
    root = find_project_root() or Path.cwd()
    for handler in config.get("handlers", {}).values():
        if "filename" in handler:
            path = Path(handler["filename"])
            if not path.is_absolute():
                path = root / path
            path.parent.mkdir(parents=True, exist_ok=True)
            handler["filename"] = str(path)

    if json_lines:
        config.setdefault("formatters", {})["json"] = {"format": JSON_FORMAT, "datefmt": DATE_FORMAT}
        console = config.get("handlers", {}).get("console")
        if console is not None:
            console["formatter"] = "json"
    return config


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure the predictarb logger tree.

    Args:
        config_path: logging.yaml to load. Defaults to config/logging.yaml
            under the project root.
        log_level: Level for the predictarb loggers. Defaults to $LOG_LEVEL.
    """
    json_lines = os.getenv("PREDICTARB_ENV", "local") != "local"
    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    path = Path(config_path) if config_path else _default_config_path()
    if path is not None and path.exists():
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        logging.config.dictConfig(_prepare_dict_config(config, json_lines))
    else:
        logging.basicConfig(
            level=level,
            format=JSON_FORMAT if json_lines else TEXT_FORMAT,
            datefmt=DATE_FORMAT,
            handlers=[logging.StreamHandler(sys.stderr)],
        )

    logging.getLogger("predictarb").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Logger under the predictarb namespace ("arb.builder" -> "predictarb.arb.builder")."""
    if not name.startswith("predictarb"):
        name = f"predictarb.{name}"
    return logging.getLogger(name)


class LoggerMixin:
    """Gives instances a `logger` named after their class."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
