# -*- coding: utf-8 -*-

# Request Guard
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Request segments and the structured results of validating them.

A request is split into three independently validated segments:
  1. params - path parameters
  2. query  - query string values
  3. body   - the already-parsed request body

SEGMENT_ORDER is the order segments are validated in and the order
failures are reported in.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple


class Segment(str, Enum):
    """One of the three independently validated parts of a request."""

    PARAMS = "params"
    QUERY = "query"
    BODY = "body"


SEGMENT_ORDER: Tuple[Segment, ...] = (Segment.PARAMS, Segment.QUERY, Segment.BODY)


@dataclass(frozen=True)
class Issue:
    """
    A single field-level validation problem.

    Attributes:
        path: Location of the offending value inside the segment, e.g. ("age",)
        message: Human readable description
        code: Machine readable error code from the schema library
    """

    path: Tuple[str, ...]
    message: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": list(self.path), "message": self.message, "code": self.code}


@dataclass(frozen=True)
class SegmentFailure:
    """All issues reported for one segment of one request."""

    segment: Segment
    errors: Tuple[Issue, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape used by the default failure handler."""
        return {
            "type": self.segment.value,
            "errors": [issue.to_dict() for issue in self.errors],
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of running a compiled schema against one segment.

    Exactly one of `value` (on success) or `errors` (on failure) is meaningful.
    """

    success: bool
    value: Any = None
    errors: Tuple[Issue, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, value: Any) -> "ValidationOutcome":
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, errors: Iterable[Issue]) -> "ValidationOutcome":
        return cls(success=False, errors=tuple(errors))


def failures_to_payload(failures: Iterable[SegmentFailure]) -> List[Dict[str, Any]]:
    """Convert failures to the JSON-ready list sent back to clients."""
    return [failure.to_dict() for failure in failures]
