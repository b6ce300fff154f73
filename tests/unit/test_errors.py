# -*- coding: utf-8 -*-

"""
Unit tests for error conversion and result types.
"""

from typing import List

from pydantic import BaseModel, TypeAdapter, ValidationError

from request_guard.errors import ConfigurationError, ValidationRejected, issues_from_pydantic
from request_guard.handlers import ResponseState
from request_guard.segments import Issue, Segment, SegmentFailure, ValidationOutcome, failures_to_payload


class Address(BaseModel):
    city: str


class Person(BaseModel):
    name: str
    addresses: List[Address]


def _capture(callable_, *args):
    try:
        callable_(*args)
    except ValidationError as exc:
        return exc
    raise AssertionError("expected ValidationError")


class TestIssuesFromPydantic:
    """Tests for issues_from_pydantic()."""

    def test_nested_paths_are_strings(self):
        """
        What it does: Converts an error nested inside a list of models.
        Purpose: Ensure list indexes appear as strings in the path.
        """
        exc = _capture(Person.model_validate, {"name": "Ann", "addresses": [{"city": 5}]})

        issues = issues_from_pydantic(exc)

        print(f"Issues: {issues}")
        assert issues == (
            Issue(path=("addresses", "0", "city"), message="Input should be a valid string", code="string_type"),
        )

    def test_root_errors_have_empty_path(self):
        """What it does: errors on the value itself have an empty path."""
        exc = _capture(TypeAdapter(int).validate_python, "abc")

        issues = issues_from_pydantic(exc)

        assert issues[0].path == ()
        assert issues[0].code == "int_parsing"

    def test_multiple_errors_keep_order(self):
        exc = _capture(Person.model_validate, {})

        assert [issue.path for issue in issues_from_pydantic(exc)] == [("name",), ("addresses",)]


class TestResultTypes:
    """Tests for result dataclasses."""

    def test_outcome_constructors(self):
        assert ValidationOutcome.ok(1).success is True
        failed = ValidationOutcome.failed(iter([Issue((), "bad", "bad")]))
        assert failed.success is False
        assert isinstance(failed.errors, tuple)

    def test_payload_uses_segment_names(self):
        payload = failures_to_payload([SegmentFailure(Segment.QUERY, ())])

        assert payload == [{"type": "query", "errors": []}]


class TestExceptions:
    """Tests for exception types."""

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_rejection_carries_response(self):
        response = ResponseState().status(400)

        exc = ValidationRejected(response)

        assert exc.response is response
        assert "400" in str(exc)
