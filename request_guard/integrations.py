# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
FastAPI / Starlette integration.

guard() wraps a RequestValidator into a FastAPI dependency:

    app = FastAPI()
    install_exception_handlers(app)

    @app.get("/users/{id}")
    async def read_user(data: RequestData = Depends(guard(params={"id": int}))):
        return {"id": data.params["id"]}

On rejection the failure handler's response is raised as ValidationRejected
and turned into a JSONResponse by validation_rejected_handler().
"""

import json
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from loguru import logger

from request_guard.errors import ValidationRejected
from request_guard.handlers import ResponseState
from request_guard.middleware import RequestData, validate
from request_guard.options import FailureHandler, ValidationOptions


def _query_to_dict(request: Request) -> Dict[str, Any]:
    """Flatten query params; repeated keys become lists."""
    query: Dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        query[key] = values[0] if len(values) == 1 else values
    return query


async def build_request_data(request: Request) -> RequestData:
    """
    Collect params, query and JSON body from a Starlette request.

    An empty body becomes {}.

    Raises:
        HTTPException: 400 if the body is not valid JSON
    """
    raw_body = await request.body()
    body: Any = {}
    if raw_body.strip():
        try:
            body = json.loads(raw_body)
        except ValueError as e:
            logger.warning("[RequestGuard] Malformed JSON body: {}", e)
            raise HTTPException(status_code=400, detail="Malformed JSON body") from e

    return RequestData(
        params=dict(request.path_params),
        query=_query_to_dict(request),
        body=body,
        raw=request,
    )


def guard(
    params: Any = None,
    query: Any = None,
    body: Any = None,
    handler: Optional[FailureHandler] = None,
    options: Optional[ValidationOptions] = None,
):
    """
    Build a FastAPI dependency that validates the current request.

    The validator is built here, once per route. The dependency returns the
    validated RequestData, or raises ValidationRejected when a failure
    handler responded without calling call_next().
    """
    validator = validate(
        params=params, query=query, body=body, handler=handler, options=options
    )

    async def dependency(request: Request) -> RequestData:
        data = await build_request_data(request)
        response = ResponseState()
        continued = False

        def call_next() -> None:
            nonlocal continued
            continued = True

        await validator(data, response, call_next)
        if not continued:
            raise ValidationRejected(response)
        return data

    return dependency


async def validation_rejected_handler(request: Request, exc: ValidationRejected) -> JSONResponse:
    """Send the response a failure handler wrote to ResponseState."""
    state = exc.response
    return JSONResponse(
        status_code=state.status_code,
        content=state.body,
        headers=state.headers or None,
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the ValidationRejected handler on a FastAPI app."""
    app.add_exception_handler(ValidationRejected, validation_rejected_handler)
