#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/logging_config.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#
"""Console logging for the command line tool. The library itself adds no handlers."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, name: str = "gltf_scene_loader") -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...), WARNING if None
        name: Logger name

    Returns:
        The configured logger
    """
    level = getattr(logging, (level or "WARNING").upper(), logging.WARNING)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger
