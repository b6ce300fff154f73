# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Exceptions and error conversion for Request Guard.

Validation failures of a request are never raised: they are collected as
SegmentFailure values and handed to a failure handler. Exceptions in this
module cover programmer errors (bad declarations, bad options) and the
host-adapter short-circuit.

Example:
    >>> from pydantic import TypeAdapter, ValidationError
    >>> try:
    ...     TypeAdapter(int).validate_python("abc")
    ... except ValidationError as exc:
    ...     issues = issues_from_pydantic(exc)
    >>> issues[0].code
    'int_parsing'
"""

from typing import TYPE_CHECKING, Any, Tuple

from pydantic import ValidationError

from request_guard.segments import Issue

if TYPE_CHECKING:
    from request_guard.handlers import ResponseState


class RequestGuardError(Exception):
    """Base class for all Request Guard exceptions."""


class ConfigurationError(RequestGuardError, ValueError):
    """
    A validator or option declaration is malformed.

    Raised at construction time (route setup), never while handling a request.
    """


class ValidationRejected(RequestGuardError):
    """
    A request was rejected and a failure handler produced a response.

    Only raised by host adapters (see request_guard.integrations) to carry
    the handler's response out of a dependency. The core middleware never
    raises it.
    """

    def __init__(self, response: "ResponseState"):
        self.response = response
        super().__init__(f"Request rejected with status {response.status_code}")


def _stringify_loc(loc: Tuple[Any, ...]) -> Tuple[str, ...]:
    return tuple(str(part) for part in loc)


def issues_from_pydantic(exc: ValidationError) -> Tuple[Issue, ...]:
    """
    Convert a pydantic ValidationError into field-level issues.

    Only location, message and error type are kept. Input values and
    context objects are dropped since they may not be JSON serializable
    and may echo sensitive client data back.

    Args:
        exc: Error raised by validate_python/model_validate

    Returns:
        Tuple of Issue in the order pydantic reported them
    """
    return tuple(
        Issue(
            path=_stringify_loc(error.get("loc", ())),
            message=error.get("msg", "Invalid value"),
            code=error.get("type", "invalid"),
        )
        for error in exc.errors()
    )
