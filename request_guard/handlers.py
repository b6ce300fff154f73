# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Failure dispatch.

When any segment of a request fails validation, exactly one failure handler
runs. Resolution order:
  1. The handler given to validate() for this route
  2. The handler in the validation options (global or injected)
  3. default_failure_handler

A custom handler owns the response completely: it may send a response,
call call_next() to continue anyway, or both. Exceptions it raises propagate
to the host framework unchanged.
"""

import inspect
from typing import Any, Callable, Dict, Optional, Sequence

from loguru import logger

from request_guard.config import FAILURE_STATUS_CODE
from request_guard.options import FailureHandler, ValidationOptions
from request_guard.segments import SegmentFailure, failures_to_payload


class ResponseState:
    """
    Host-independent response a failure handler writes to.

    Mirrors the small status()/send() surface handlers need. Host adapters
    turn it into a framework response afterwards.
    """

    def __init__(self) -> None:
        self.status_code: int = 200
        self.body: Any = None
        self.headers: Dict[str, str] = {}
        self.sent: bool = False

    def status(self, code: int) -> "ResponseState":
        self.status_code = code
        return self

    def send(self, body: Any = None) -> "ResponseState":
        self.body = body
        self.sent = True
        return self

    json = send

    def __repr__(self) -> str:
        return f"ResponseState(status_code={self.status_code}, sent={self.sent})"


def default_failure_handler(
    failures: Sequence[SegmentFailure],
    request: Any,
    response: ResponseState,
    call_next: Callable[[], Any],
) -> None:
    """Respond with 400 and one {type, errors} entry per failed segment."""
    response.status(FAILURE_STATUS_CODE).send(failures_to_payload(failures))


def resolve_handler(
    local_handler: Optional[FailureHandler], options: ValidationOptions
) -> FailureHandler:
    """Pick the handler to run for a rejected request."""
    if local_handler is not None:
        logger.debug("[FailureDispatch] Using route handler")
        return local_handler
    if options.handler is not None:
        logger.debug("[FailureDispatch] Using global handler")
        return options.handler
    return default_failure_handler


async def dispatch(
    failures: Sequence[SegmentFailure],
    request: Any,
    response: ResponseState,
    call_next: Callable[[], Any],
    local_handler: Optional[FailureHandler],
    options: ValidationOptions,
) -> None:
    """
    Run exactly one failure handler, awaiting it if it is asynchronous.

    Args:
        failures: Failed segments in params, query, body order
        request: The request being validated (left unmodified)
        response: Response the handler writes to
        call_next: Continuation, passed through untouched
        local_handler: Route-level handler, if any
        options: Options providing the fallback handler
    """
    handler = resolve_handler(local_handler, options)
    result = handler(failures, request, response, call_next)
    if inspect.isawaitable(result):
        await result
