from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

AccessKey = Tuple[str, str]


@dataclass
class AccessState:
    """
    Last granted time per (employee_id, room) pair.

    Owned by exactly one evaluator and scoped to one simulation run. Values
    are minutes since midnight. Only granted requests are ever recorded.
    """

    _last_granted: Dict[AccessKey, int] = field(default_factory=dict, init=False, repr=False)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def last_granted(self, employee_id: str, room: str) -> Optional[int]:
        with self._lock:
            return self._last_granted.get((employee_id, room))

    def record(self, employee_id: str, room: str, minutes: int) -> None:
        """Record a grant, overwriting any earlier one for the pair."""
        with self._lock:
            self._last_granted[(employee_id, room)] = minutes

    def clear(self) -> None:
        with self._lock:
            self._last_granted.clear()

    def snapshot(self) -> Mapping[AccessKey, int]:
        with self._lock:
            return MappingProxyType(dict(self._last_granted))

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_granted)
