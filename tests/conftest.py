# -*- coding: utf-8 -*-

"""
Shared fixtures for Request Guard tests.
"""

from typing import Any, Dict, Optional

import pytest

from request_guard import RequestData, ResponseState, reset_global_options


@pytest.fixture(autouse=True)
def clean_global_options():
    """Every test starts and ends with DEFAULT_OPTIONS as the global options."""
    reset_global_options()
    yield
    reset_global_options()


class NextRecorder:
    """call_next stand-in that counts its calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1

    @property
    def called(self) -> bool:
        return self.calls > 0


@pytest.fixture
def make_request():
    """Factory for RequestData with empty segments by default."""

    def _make(
        params: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> RequestData:
        return RequestData(
            params={} if params is None else params,
            query={} if query is None else query,
            body={} if body is None else body,
        )

    return _make


@pytest.fixture
def response() -> ResponseState:
    return ResponseState()


@pytest.fixture
def call_next() -> NextRecorder:
    return NextRecorder()
