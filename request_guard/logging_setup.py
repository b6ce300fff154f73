# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Loguru sink setup for applications embedding Request Guard."""

import sys
from typing import Any, Optional

from loguru import logger

from request_guard.config import LOG_LEVEL

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, sink: Any = None) -> int:
    """
    Replace loguru's default sink with one at the configured level.

    Args:
        level: Log level name, defaults to LOG_LEVEL from the environment
        sink: Any loguru sink, defaults to stderr

    Returns:
        The loguru handler id, usable with logger.remove()
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
