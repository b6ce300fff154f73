# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Request Guard - pydantic validation middleware for request params, query and body.

Modules:
    - config: Environment-driven defaults
    - options: Process-wide validation options
    - segments: Segment enum and structured validation results
    - schemas: Schema normalization (models, TypeAdapters, field maps)
    - executor: Per-request validation and request rewriting
    - handlers: Failure dispatch and the default 400 handler
    - middleware: validate() and RequestValidator
    - integrations: FastAPI dependency and exception handler
"""

# Version is imported from config.py - the single source of truth
from request_guard.config import APP_VERSION as __version__

# Middleware
from request_guard.middleware import RequestData, RequestValidator, validate

# Options
from request_guard.options import (
    DEFAULT_OPTIONS,
    ValidationOptions,
    get_global_options,
    reset_global_options,
    set_global_options,
)

# Schemas
from request_guard.schemas import (
    CompiledSchema,
    FieldMap,
    PassThroughSchema,
    PydanticSchema,
    Schema,
    refine,
)

# Results
from request_guard.segments import Issue, Segment, SegmentFailure, ValidationOutcome

# Failure handling
from request_guard.handlers import ResponseState, default_failure_handler
from request_guard.errors import ConfigurationError, RequestGuardError, ValidationRejected

__all__ = [
    # Version
    "__version__",

    # Middleware
    "validate",
    "RequestValidator",
    "RequestData",

    # Options
    "DEFAULT_OPTIONS",
    "ValidationOptions",
    "get_global_options",
    "set_global_options",
    "reset_global_options",

    # Schemas
    "CompiledSchema",
    "Schema",
    "FieldMap",
    "PydanticSchema",
    "PassThroughSchema",
    "refine",

    # Results
    "Segment",
    "Issue",
    "SegmentFailure",
    "ValidationOutcome",

    # Failure handling
    "ResponseState",
    "default_failure_handler",
    "RequestGuardError",
    "ConfigurationError",
    "ValidationRejected",
]
