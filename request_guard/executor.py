# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Per-request validation and request rewriting.

execute() validates every segment, even after an earlier segment failed, so
a client gets the complete list of problems in one response.
apply_outcomes() then either rewrites all segments with the coerced values
or leaves the request untouched and reports the failures.
"""

import inspect
from typing import Any, Dict, List, Mapping

from request_guard.segments import SEGMENT_ORDER, Segment, SegmentFailure, ValidationOutcome


async def execute(
    compiled: Mapping[Segment, Any], request: Any
) -> Dict[Segment, ValidationOutcome]:
    """
    Validate each request segment against its compiled schema.

    Args:
        compiled: One compiled schema per segment
        request: Object exposing params, query and body attributes

    Returns:
        Outcome per segment, in SEGMENT_ORDER

    Raises:
        TypeError: If a schema returns something other than ValidationOutcome
    """
    outcomes: Dict[Segment, ValidationOutcome] = {}

    for segment in SEGMENT_ORDER:
        value = getattr(request, segment.value, None)
        if value is None:
            value = {}

        outcome = compiled[segment].validate(value)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if not isinstance(outcome, ValidationOutcome):
            raise TypeError(
                f"Schema for {segment.value} returned {type(outcome).__name__}, "
                "expected ValidationOutcome"
            )
        outcomes[segment] = outcome

    return outcomes


def apply_outcomes(
    outcomes: Mapping[Segment, ValidationOutcome], request: Any
) -> List[SegmentFailure]:
    """
    Rewrite the request with validated data, all or nothing.

    Args:
        outcomes: Result of execute()
        request: Request to rewrite

    Returns:
        Failures in SEGMENT_ORDER; empty if the request was rewritten
    """
    failures = [
        SegmentFailure(segment=segment, errors=outcomes[segment].errors)
        for segment in SEGMENT_ORDER
        if not outcomes[segment].success
    ]
    if failures:
        return failures

    for segment in SEGMENT_ORDER:
        setattr(request, segment.value, outcomes[segment].value)
    return []
