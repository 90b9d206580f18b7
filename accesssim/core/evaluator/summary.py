from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable

from .decisions import Decision


def reason_category(reason: str) -> str:
    """Leading clause of a reason: up to and including the first ':'.

    Reasons without a colon are their own category.
    """

    head, sep, _ = reason.partition(":")
    return head + sep


def format_rate(granted: int, total: int) -> str:
    """Percentage with one decimal and a trailing '%'; "0.0%" for no requests.

    Ties round half up on the exact float value, so 1/16 is "6.3%".
    """

    if not total:
        return "0.0%"
    rate = Decimal(granted / total * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rate}%"


@dataclass(frozen=True)
class Summary:
    """Aggregate view over one batch of decisions."""

    total_requests: int
    granted_requests: int
    denied_requests: int
    success_rate: str
    denial_reasons: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "grantedRequests": self.granted_requests,
            "deniedRequests": self.denied_requests,
            "successRate": self.success_rate,
            "denialReasons": dict(self.denial_reasons),
        }


def summarize(decisions: Iterable[Decision]) -> Summary:
    items = list(decisions)
    total = len(items)
    granted = sum(1 for d in items if d.granted)

    reasons: Dict[str, int] = {}
    for d in items:
        if d.granted:
            continue
        key = reason_category(d.reason)
        reasons[key] = reasons.get(key, 0) + 1

    return Summary(
        total_requests=total,
        granted_requests=granted,
        denied_requests=total - granted,
        success_rate=format_rate(granted, total),
        denial_reasons=reasons,
    )
