"""Proportional breakdown of time spent, for the radial chart and the
share postcard.

Segments are laid out in collection order.  Spans are real-valued and
never corrected, so their sum can miss 360° by floating-point rounding.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..timer.records import elapsed_for_total, format_time, tag_color

EMPTY_GRADIENT = "conic-gradient(var(--color-border) 0% 100%)"
NO_DATA_LABEL = "No data yet"
SUMMARY_LIMIT = 5


@dataclass(frozen=True)
class Segment:
    name: str
    tag: str
    color: str
    ms: int
    start: float    # degrees
    span: float     # degrees

    @property
    def end(self) -> float:
        return self.start + self.span


@dataclass
class Breakdown:
    """Snapshot the chart and its legend are drawn from."""

    total_ms: int = 0
    segments: list[Segment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_ms <= 0

    def conic_gradient(self) -> str:
        if self.is_empty:
            return EMPTY_GRADIENT
        parts = ", ".join(f"{s.color} {s.start}deg {s.end}deg" for s in self.segments)
        return f"conic-gradient({parts})"

    def legend(self) -> list[tuple[str, str, str]]:
        """``(colour, name, HH:MM:SS)`` rows; empty when there is no data."""
        return [(s.color, s.name, format_time(s.ms)) for s in self.segments]


def breakdown(records) -> Breakdown:
    entries = [(r, elapsed_for_total(r)) for r in records]
    total = sum(ms for _, ms in entries)
    result = Breakdown(total_ms=total)
    if total <= 0:
        return result

    cumulative = 0.0
    for record, ms in entries:
        if ms <= 0:
            continue
        span = ms / total * 360
        result.segments.append(Segment(
            name=record.name,
            tag=record.tag,
            color=tag_color(record.tag),
            ms=ms,
            start=cumulative,
            span=span,
        ))
        cumulative += span
    return result


def can_share(records) -> bool:
    return sum(elapsed_for_total(r) for r in records) > 0


@dataclass(frozen=True)
class ShareSummary:
    total_ms: int
    total: str
    items: tuple[tuple[str, str], ...]   # (name, HH:MM:SS)
    gradient: str


def share_summary(records, limit: int = SUMMARY_LIMIT) -> ShareSummary:
    """Content of the share postcard: the total, the chart, and the first
    *limit* timers in collection order (idle ones included)."""
    records = list(records)
    chart = breakdown(records)
    items = tuple(
        (r.name, format_time(elapsed_for_total(r))) for r in records[:limit]
    )
    return ShareSummary(
        total_ms=chart.total_ms,
        total=format_time(chart.total_ms),
        items=items,
        gradient=chart.conic_gradient(),
    )
