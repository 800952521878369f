from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .transit_route import FinalizedTransitRoute


class ImportIssueKind(str, Enum):
    POINT_OUT_OF_BOUNDS = "point_out_of_bounds"
    NO_VIABLE_TRIP = "no_viable_trip"
    UNMATCHED_STOP = "unmatched_stop"
    ROUTE_UNROUTABLE = "route_unroutable"
    DUPLICATE_ROUTE_ID = "duplicate_route_id"


@dataclass(frozen=True, slots=True)
class ImportIssue:
    """A non-fatal problem that excluded a point, stop or route from the output."""

    kind: ImportIssueKind
    route_id: str | None = None
    stop_id: str | None = None
    message: str = ""
    source: str | None = None


@dataclass(frozen=True, slots=True)
class ImportResult:
    routes: tuple[FinalizedTransitRoute, ...] = field(default_factory=tuple)
    issues: tuple[ImportIssue, ...] = field(default_factory=tuple)
    # Feed each route came from, aligned with `routes`.
    sources: tuple[str | None, ...] = field(default_factory=tuple)

    def issues_of(self, kind: ImportIssueKind) -> tuple[ImportIssue, ...]:
        return tuple(i for i in self.issues if i.kind is kind)
