from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from accesssim.core.policy.exceptions import InvalidBatchError, InvalidTimeError
from accesssim.core.timeofday import time_to_minutes

_ID_KEYS = ("id", "employeeId")
_LEVEL_KEYS = ("access_level", "accessLevel")
_TIME_KEYS = ("request_time", "requestTime", "requestedTime")


def _first(raw: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for k in keys:
        if k in raw:
            return raw[k]
    return None


@dataclass(frozen=True, slots=True)
class AccessRequest:
    """
    One employee asking to enter one room at one time of day.

    requested_minutes is derived at construction, so an instance always
    carries a valid time.
    """

    employee_id: str
    access_level: int
    requested_time: str
    room: str
    requested_minutes: int = field(init=False, default=-1)

    def __post_init__(self) -> None:
        if not isinstance(self.employee_id, str) or self.employee_id == "":
            raise InvalidBatchError("employee id must be a non-empty string")
        if isinstance(self.access_level, bool) or not isinstance(self.access_level, int):
            raise InvalidBatchError(
                f"employee '{self.employee_id}': access level must be an integer"
            )
        if not isinstance(self.room, str):
            raise InvalidBatchError(f"employee '{self.employee_id}': room must be a string")
        try:
            minutes = time_to_minutes(self.requested_time)
        except InvalidTimeError as e:
            raise InvalidBatchError(f"employee '{self.employee_id}': {e}") from e
        object.__setattr__(self, "requested_minutes", minutes)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AccessRequest":
        """Build a request from its wire form.

        Wire keys: id, access_level, request_time, room. camelCase aliases
        (employeeId, accessLevel, requestTime, requestedTime) are accepted.
        """

        if not isinstance(raw, Mapping):
            raise InvalidBatchError("each request must be an object")

        return cls(
            employee_id=_first(raw, _ID_KEYS),
            access_level=_first(raw, _LEVEL_KEYS),
            requested_time=_first(raw, _TIME_KEYS),
            room=raw.get("room"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.employee_id,
            "access_level": self.access_level,
            "request_time": self.requested_time,
            "room": self.room,
        }


def parse_batch(raw: Any, *, max_size: Optional[int] = None) -> List[AccessRequest]:
    """Validate a raw batch and convert it to AccessRequest values.

    A batch must be a list. A single malformed request rejects the whole
    batch with InvalidBatchError; no partial batch is returned.
    """

    if raw is None:
        raise InvalidBatchError("batch is missing")
    if not isinstance(raw, list):
        raise InvalidBatchError(f"batch must be a list, got {type(raw).__name__}")
    if max_size is not None and len(raw) > max_size:
        raise InvalidBatchError(f"batch too large: {len(raw)} > {max_size}")

    out: List[AccessRequest] = []
    for i, item in enumerate(raw):
        try:
            out.append(item if isinstance(item, AccessRequest) else AccessRequest.from_mapping(item))
        except InvalidBatchError as e:
            raise InvalidBatchError(f"request #{i}: {e}") from e
    return out
