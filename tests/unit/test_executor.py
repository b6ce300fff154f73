# -*- coding: utf-8 -*-

"""
Unit tests for per-request validation and request rewriting.
"""

import asyncio

import pytest

from request_guard.executor import apply_outcomes, execute
from request_guard.middleware import RequestData
from request_guard.schemas import compile_field_map
from request_guard.segments import Issue, Segment, ValidationOutcome


class RecordingSchema:
    """Schema that records the values it sees and returns a fixed outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.seen = []

    def validate(self, value):
        self.seen.append(value)
        return self.outcome


class SlowSchema:
    """Async schema that yields to the loop before answering."""

    async def validate(self, value):
        await asyncio.sleep(0)
        return ValidationOutcome.ok({"slow": True})


FAILED = ValidationOutcome.failed([Issue(path=("x",), message="bad", code="bad")])


class TestExecute:
    """Tests for execute()."""

    @pytest.mark.asyncio
    async def test_validates_every_segment_after_failure(self):
        """
        What it does: Makes params fail and checks query/body still ran.
        Purpose: Ensure one round-trip reports all segment failures.
        """
        schemas = {
            Segment.PARAMS: RecordingSchema(FAILED),
            Segment.QUERY: RecordingSchema(FAILED),
            Segment.BODY: RecordingSchema(ValidationOutcome.ok({})),
        }

        outcomes = await execute(schemas, RequestData())

        assert list(outcomes) == [Segment.PARAMS, Segment.QUERY, Segment.BODY]
        assert all(len(schema.seen) == 1 for schema in schemas.values())
        assert outcomes[Segment.BODY].success is True

    @pytest.mark.asyncio
    async def test_awaits_async_schemas(self):
        """What it does: awaitable results are awaited before being recorded."""
        empty = compile_field_map({}, "strict")
        schemas = {Segment.PARAMS: empty, Segment.QUERY: empty, Segment.BODY: SlowSchema()}

        outcomes = await execute(schemas, RequestData())

        assert outcomes[Segment.BODY].value == {"slow": True}

    @pytest.mark.asyncio
    async def test_missing_segment_defaults_to_empty_dict(self):
        """What it does: None segments are validated as {}."""
        recorder = RecordingSchema(ValidationOutcome.ok({}))
        schemas = {segment: recorder for segment in Segment}

        await execute(schemas, RequestData(params=None, query=None, body=None))

        assert recorder.seen == [{}, {}, {}]

    @pytest.mark.asyncio
    async def test_rejects_non_outcome_results(self):
        """What it does: a schema returning a raw value is a TypeError."""
        bad = RecordingSchema({"not": "an outcome"})
        schemas = {segment: bad for segment in Segment}

        with pytest.raises(TypeError, match="ValidationOutcome"):
            await execute(schemas, RequestData())


class TestApplyOutcomes:
    """Tests for apply_outcomes()."""

    def test_rewrites_all_segments_on_success(self):
        """What it does: every segment gets its coerced value."""
        request = RequestData(params={"id": "1"}, query={"q": "a"}, body={"n": "2"})
        outcomes = {
            Segment.PARAMS: ValidationOutcome.ok({"id": 1}),
            Segment.QUERY: ValidationOutcome.ok({"q": "a"}),
            Segment.BODY: ValidationOutcome.ok({"n": 2}),
        }

        failures = apply_outcomes(outcomes, request)

        assert failures == []
        assert request.params == {"id": 1}
        assert request.body == {"n": 2}

    def test_leaves_request_untouched_on_failure(self):
        """
        What it does: One failing segment among two valid ones.
        Purpose: Ensure the request is never partially rewritten.
        """
        request = RequestData(params={"id": "1"}, query={"q": "a"}, body={"n": "2"})
        outcomes = {
            Segment.PARAMS: ValidationOutcome.ok({"id": 1}),
            Segment.QUERY: ValidationOutcome.ok({"q": "a"}),
            Segment.BODY: FAILED,
        }

        failures = apply_outcomes(outcomes, request)

        assert [failure.segment for failure in failures] == [Segment.BODY]
        assert request.params == {"id": "1"}
        assert request.body == {"n": "2"}
