from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .requests import AccessRequest


class DenialKind(str, Enum):
    """
    Enumerated denial categories, in rule precedence order.

    Using str Enum ensures stable serialization and safe comparisons.
    """

    UNKNOWN_ROOM = "UNKNOWN_ROOM"
    INSUFFICIENT_ACCESS_LEVEL = "INSUFFICIENT_ACCESS_LEVEL"
    ROOM_CLOSED = "ROOM_CLOSED"
    COOLDOWN_ACTIVE = "COOLDOWN_ACTIVE"


_REASON_TEMPLATES: Dict[DenialKind, str] = {
    DenialKind.UNKNOWN_ROOM: "Room '{room}' not found in system",
    DenialKind.INSUFFICIENT_ACCESS_LEVEL: (
        "Access denied: Insufficient access level (required: {required}, has: {actual})"
    ),
    DenialKind.ROOM_CLOSED: (
        "Access denied: Room closed (open: {open_time}-{close_time}, requested: {requested_time})"
    ),
    DenialKind.COOLDOWN_ACTIVE: (
        "Access denied: Cooldown period active "
        "(last access: {last_access}, cooldown: {cooldown} minutes)"
    ),
}


@dataclass(frozen=True)
class Denial:
    """
    Structured denial: a kind plus the parameters that explain it.

    The human-readable text is rendered from a fixed template per kind, so
    tests can assert on kind and params without depending on wording.
    """

    kind: DenialKind
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.kind, DenialKind):
            raise TypeError("kind must be a DenialKind")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def reason(self) -> str:
        return _REASON_TEMPLATES[self.kind].format(**self.params)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "params": dict(self.params), "reason": self.reason}


@dataclass(frozen=True)
class Decision:
    """
    Immutable grant/deny outcome for one request.

    Invariants
    - granted is True exactly when denial is None
    - to_dict returns JSON-safe primitives with the public field names
    """

    employee_id: str
    room: str
    request_time: str
    granted: bool
    denial: Optional[Denial] = None

    def __post_init__(self) -> None:
        if self.granted and self.denial is not None:
            raise ValueError("a granted decision cannot carry a denial")
        if not self.granted and self.denial is None:
            raise ValueError("a denied decision must carry a denial")

    @classmethod
    def grant(cls, request: AccessRequest) -> "Decision":
        return cls(
            employee_id=request.employee_id,
            room=request.room,
            request_time=request.requested_time,
            granted=True,
        )

    @classmethod
    def deny(cls, request: AccessRequest, denial: Denial) -> "Decision":
        return cls(
            employee_id=request.employee_id,
            room=request.room,
            request_time=request.requested_time,
            granted=False,
            denial=denial,
        )

    @property
    def denial_kind(self) -> Optional[DenialKind]:
        return self.denial.kind if self.denial is not None else None

    @property
    def reason(self) -> str:
        if self.denial is not None:
            return self.denial.reason
        return f"Access granted to {self.room}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employeeId": self.employee_id,
            "room": self.room,
            "requestTime": self.request_time,
            "granted": self.granted,
            "reason": self.reason,
        }
