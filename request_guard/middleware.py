# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Request validation middleware.

validate() builds a RequestValidator for one route. The validator is an
async callable with the (request, response, call_next) contract:

  1. Every segment (params, query, body) is validated
  2. If all pass, each segment on the request is replaced by its validated
     output and call_next() runs once
  3. Otherwise the request is left untouched and one failure handler runs

Example:
    >>> from typing import Annotated
    >>> from pydantic import Field
    >>> guard = validate(
    ...     params={"id": int},
    ...     query={
    ...         "name": Annotated[str, Field(min_length=3, max_length=10)],
    ...         "age": Annotated[int, Field(ge=18)],
    ...     },
    ... )
    >>> request = RequestData(params={"id": "7"}, query={"name": "Ann", "age": "20"})
    >>> await guard(request, ResponseState(), call_next)
    >>> request.params
    {'id': 7}
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from loguru import logger

from request_guard.errors import ConfigurationError
from request_guard.executor import apply_outcomes, execute
from request_guard.handlers import ResponseState, dispatch
from request_guard.options import FailureHandler, ValidationOptions, get_global_options
from request_guard.schemas import as_declaration, compile_segment
from request_guard.segments import SEGMENT_ORDER, Segment

_DECLARATION_KEYS = frozenset(["params", "query", "body", "handler"])


@dataclass
class RequestData:
    """
    Mutable view of a request's three validated segments.

    Built fresh for every request by the host adapter. After a successful
    validation the segments hold the validated output.

    Attributes:
        params: Path parameters
        query: Query string values
        body: Parsed request body
        raw: The host framework's own request object, if any
    """

    params: Any = field(default_factory=dict)
    query: Any = field(default_factory=dict)
    body: Any = field(default_factory=dict)
    raw: Any = None


class RequestValidator:
    """
    Validation middleware for one route.

    Schemas are compiled once in __init__ and only read afterwards, so one
    instance can serve any number of concurrent requests.
    """

    def __init__(
        self,
        params: Any = None,
        query: Any = None,
        body: Any = None,
        handler: Optional[FailureHandler] = None,
        options: Optional[ValidationOptions] = None,
    ):
        if handler is not None and not callable(handler):
            raise ConfigurationError("handler must be callable")

        self.handler = handler
        self.options = options
        construction_options = options if options is not None else get_global_options()

        declarations = {
            Segment.PARAMS: as_declaration(params),
            Segment.QUERY: as_declaration(query),
            Segment.BODY: as_declaration(body),
        }
        self.schemas: Dict[Segment, Any] = {
            segment: compile_segment(
                declarations[segment],
                construction_options,
                model_name=f"{segment.value.capitalize()}Fields",
            )
            for segment in SEGMENT_ORDER
        }

        logger.debug(
            "[RequestValidator] Built: params={}, query={}, body={}, object_mode={}, missing={}",
            type(declarations[Segment.PARAMS]).__name__,
            type(declarations[Segment.QUERY]).__name__,
            type(declarations[Segment.BODY]).__name__,
            construction_options.default_schema_object,
            construction_options.missing_schema_behavior,
        )

    async def __call__(
        self,
        request: Any,
        response: ResponseState,
        call_next: Callable[[], Any],
    ) -> None:
        outcomes = await execute(self.schemas, request)
        failures = apply_outcomes(outcomes, request)

        if not failures:
            result = call_next()
            if inspect.isawaitable(result):
                await result
            return

        logger.info(
            "[RequestValidator] Rejected request: failed segments={}",
            [failure.segment.value for failure in failures],
        )
        options = self.options if self.options is not None else get_global_options()
        await dispatch(failures, request, response, call_next, self.handler, options)


def validate(
    schemas: Optional[Mapping[str, Any]] = None,
    *,
    params: Any = None,
    query: Any = None,
    body: Any = None,
    handler: Optional[FailureHandler] = None,
    options: Optional[ValidationOptions] = None,
) -> RequestValidator:
    """
    Create validation middleware for a route.

    Each segment accepts a pydantic model class, a TypeAdapter, any object
    with a validate() method, or a mapping of field name -> annotation.
    Segments without a declaration follow missing_schema_behavior.

    Args:
        schemas: Optional mapping with params/query/body/handler keys
        params: Schema for path parameters
        query: Schema for the query string
        body: Schema for the parsed body
        handler: Failure handler for this route only
        options: Options to use instead of the global options

    Returns:
        RequestValidator ready to be awaited per request

    Raises:
        ConfigurationError: On unknown keys or malformed declarations
    """
    declared: Dict[str, Any] = {}
    if schemas is not None:
        if not isinstance(schemas, Mapping):
            raise ConfigurationError(
                f"validate() expects a mapping of schemas, got {type(schemas).__name__}"
            )
        unknown = set(schemas) - _DECLARATION_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown validate() keys: {sorted(unknown)}")
        declared.update(schemas)

    for key, value in (("params", params), ("query", query), ("body", body), ("handler", handler)):
        if value is not None:
            declared[key] = value

    return RequestValidator(options=options, **declared)
