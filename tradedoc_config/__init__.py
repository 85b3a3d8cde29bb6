"""
Trade document configuration (``tradedoc_config``).

``get_active_config()`` is the single entry point: services receive the
returned ``TradeDocConfig`` through their constructors and never read
files or environment variables themselves.
"""

from __future__ import annotations

from pathlib import Path

from tradedoc_config.loader import load_config
from tradedoc_config.schema import (
    DocumentTypePolicy,
    FileRule,
    StoragePolicy,
    TradeDocConfig,
)
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> TradeDocConfig:
    """
    Load and validate a configuration set.

    Args:
        config_path: YAML file to load.  Defaults to the bundled
            ``sets/default.yaml``.

    Raises:
        FileNotFoundError, yaml.YAMLError, KeyError, ValueError.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_config(path)
    logger.info(
        "config_loaded",
        extra={
            "config_name": config.name,
            "config_version": config.version,
            "checksum": config.checksum,
            "path": str(path),
            "document_types": sorted(config.document_types),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DocumentTypePolicy",
    "FileRule",
    "StoragePolicy",
    "TradeDocConfig",
    "get_active_config",
]
