# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Request Guard Configuration.

Process-level defaults loaded from environment variables (and a .env file).
These seed DEFAULT_OPTIONS in request_guard.options; runtime changes go
through set_global_options() instead of these constants.
"""

import os
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ==================================================================================================
# Validation Defaults
# ==================================================================================================

SCHEMA_OBJECT_MODES: Tuple[str, ...] = ("strict", "lax")
MISSING_SCHEMA_MODES: Tuple[str, ...] = ("strict", "any")

# How field-map declarations ({"name": str, ...}) treat undeclared fields:
# - strict: reject the whole segment if it carries any undeclared field
# - lax: drop undeclared fields silently
# Pre-built schemas (pydantic models, TypeAdapters) are never affected.
# Default: strict
_DEFAULT_SCHEMA_OBJECT_RAW: str = os.getenv(
    "REQUEST_GUARD_DEFAULT_SCHEMA_OBJECT", "strict"
).lower()
if _DEFAULT_SCHEMA_OBJECT_RAW in SCHEMA_OBJECT_MODES:
    DEFAULT_SCHEMA_OBJECT: str = _DEFAULT_SCHEMA_OBJECT_RAW
else:
    DEFAULT_SCHEMA_OBJECT: str = "strict"

# What a segment without a declared schema accepts:
# - strict: only empty data (treated as an empty strict field map)
# - any: anything, passed through unchanged
# Default: strict
_MISSING_SCHEMA_BEHAVIOR_RAW: str = os.getenv(
    "REQUEST_GUARD_MISSING_SCHEMA_BEHAVIOR", "strict"
).lower()
if _MISSING_SCHEMA_BEHAVIOR_RAW in MISSING_SCHEMA_MODES:
    MISSING_SCHEMA_BEHAVIOR: str = _MISSING_SCHEMA_BEHAVIOR_RAW
else:
    MISSING_SCHEMA_BEHAVIOR: str = "strict"

# HTTP status used by the built-in failure handler.
# Default: 400
FAILURE_STATUS_CODE: int = int(os.getenv("REQUEST_GUARD_FAILURE_STATUS", "400"))

# ==================================================================================================
# Logging Settings
# ==================================================================================================

# Log level for Request Guard
# Available levels: TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
# Default: INFO
# Set to DEBUG to see validator construction and handler resolution
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ==================================================================================================
# Application Version
# ==================================================================================================

APP_VERSION: str = "1.1.0"
