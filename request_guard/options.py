# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Process-wide validation options.

The live options are an immutable ValidationOptions snapshot held in a module
global. set_global_options() builds a new snapshot and swaps the reference
under a writer lock, so readers always see either the old or the new
snapshot as a whole.

Options are read at two different times:
  - default_schema_object and missing_schema_behavior: when a validator is
    constructed (route setup). Later changes do not affect existing routes.
  - handler: on every rejected request.

Callers that want deterministic behavior (e.g. parallel tests) can bypass the
global entirely by passing options= to validate().
"""

import dataclasses
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from loguru import logger

from request_guard.config import (
    DEFAULT_SCHEMA_OBJECT,
    MISSING_SCHEMA_BEHAVIOR,
    MISSING_SCHEMA_MODES,
    SCHEMA_OBJECT_MODES,
)
from request_guard.errors import ConfigurationError

# (failures, request, response, call_next) -> None | Awaitable[None]
FailureHandler = Callable[[Sequence[Any], Any, Any, Callable[[], Any]], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class ValidationOptions:
    """
    Validation settings shared by validators.

    Attributes:
        handler: Failure handler used when a validator has none of its own
        default_schema_object: "strict" or "lax" for field-map declarations
        missing_schema_behavior: "strict" or "any" for undeclared segments
    """

    handler: Optional[FailureHandler] = None
    default_schema_object: str = DEFAULT_SCHEMA_OBJECT
    missing_schema_behavior: str = MISSING_SCHEMA_BEHAVIOR

    def __post_init__(self) -> None:
        if self.default_schema_object not in SCHEMA_OBJECT_MODES:
            raise ConfigurationError(
                f"default_schema_object must be one of {SCHEMA_OBJECT_MODES}, "
                f"got {self.default_schema_object!r}"
            )
        if self.missing_schema_behavior not in MISSING_SCHEMA_MODES:
            raise ConfigurationError(
                f"missing_schema_behavior must be one of {MISSING_SCHEMA_MODES}, "
                f"got {self.missing_schema_behavior!r}"
            )
        if self.handler is not None and not callable(self.handler):
            raise ConfigurationError("handler must be callable")


DEFAULT_OPTIONS = ValidationOptions()

_OPTION_NAMES = frozenset(field.name for field in dataclasses.fields(ValidationOptions))

_write_lock = threading.Lock()
_current: ValidationOptions = DEFAULT_OPTIONS


def get_global_options() -> ValidationOptions:
    """Return the current process-wide options snapshot."""
    return _current


def set_global_options(
    partial: Optional[Mapping[str, Any]] = None, **overrides: Any
) -> ValidationOptions:
    """
    Overlay the given keys onto the current global options.

    Keys not given keep their current value. Passing handler=None clears a
    previously set global handler.

    Args:
        partial: Mapping of option names to new values
        **overrides: Same as partial, as keyword arguments (win over partial)

    Returns:
        The new options snapshot

    Raises:
        ConfigurationError: On unknown option names or invalid values
    """
    global _current

    changes = dict(partial or {})
    changes.update(overrides)
    unknown = set(changes) - _OPTION_NAMES
    if unknown:
        raise ConfigurationError(f"Unknown validation options: {sorted(unknown)}")

    with _write_lock:
        updated = dataclasses.replace(_current, **changes)
        _current = updated

    logger.info("[ValidationOptions] Global options updated: {}", sorted(changes))
    return updated


def reset_global_options() -> ValidationOptions:
    """Restore DEFAULT_OPTIONS as the global options."""
    global _current

    with _write_lock:
        _current = DEFAULT_OPTIONS
    return DEFAULT_OPTIONS
