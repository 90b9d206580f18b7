from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from accesssim.core.policy.exceptions import InvalidTimeError, PolicyConfigurationError
from accesssim.core.timeofday import MINUTES_PER_DAY, format_minutes, time_to_minutes


def _non_negative_int(raw: Mapping[str, Any], key: str, room: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise PolicyConfigurationError(f"room '{room}': {key} must be an integer")
    if value < 0:
        raise PolicyConfigurationError(f"room '{room}': {key} must be >= 0")
    return value


def _time_field(raw: Mapping[str, Any], key: str, room: str) -> int:
    try:
        return time_to_minutes(raw.get(key))
    except InvalidTimeError as e:
        raise PolicyConfigurationError(f"room '{room}': {key}: {e}") from e


@dataclass(frozen=True, slots=True)
class RoomPolicy:
    """
    Immutable per-room rule set.

    Times are minutes since midnight. The hours window is inclusive on both
    ends.
    """

    min_access_level: int
    open_minutes: int
    close_minutes: int
    cooldown_minutes: int = 0

    def __post_init__(self) -> None:
        for name in ("min_access_level", "cooldown_minutes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise PolicyConfigurationError(f"{name} must be an integer >= 0")
        for name in ("open_minutes", "close_minutes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise PolicyConfigurationError(f"{name} must be an integer")
            if not 0 <= value < MINUTES_PER_DAY:
                raise PolicyConfigurationError(
                    f"{name} must be within 0-{MINUTES_PER_DAY - 1}, got {value}"
                )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], *, room: str = "?") -> "RoomPolicy":
        """Build a policy from its wire form.

        Wire keys: minAccessLevel, openTime, closeTime, cooldown
        (cooldownMinutes is accepted as an alias).
        """

        if not isinstance(raw, Mapping):
            raise PolicyConfigurationError(f"room '{room}': policy must be an object")

        cooldown_key = "cooldown" if "cooldown" in raw else "cooldownMinutes"
        return cls(
            min_access_level=_non_negative_int(raw, "minAccessLevel", room),
            open_minutes=_time_field(raw, "openTime", room),
            close_minutes=_time_field(raw, "closeTime", room),
            cooldown_minutes=_non_negative_int(raw, cooldown_key, room),
        )

    @property
    def open_time(self) -> str:
        return format_minutes(self.open_minutes)

    @property
    def close_time(self) -> str:
        return format_minutes(self.close_minutes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minAccessLevel": self.min_access_level,
            "openTime": self.open_time,
            "closeTime": self.close_time,
            "cooldown": self.cooldown_minutes,
        }


def _freeze_policies(value: Optional[Mapping[str, RoomPolicy]]) -> MappingProxyType:
    if value is None:
        return MappingProxyType({})

    if not isinstance(value, Mapping):
        raise TypeError("policies must be a mapping")

    copied: Dict[str, RoomPolicy] = dict(value)

    for k, v in copied.items():
        if not isinstance(k, str):
            raise TypeError("room identifiers must be strings")
        if not isinstance(v, RoomPolicy):
            raise TypeError("policies must contain only RoomPolicy instances")

    return MappingProxyType(copied)


@dataclass(frozen=True)
class PolicyTable:
    """
    Read-only room -> RoomPolicy configuration.

    Construction copies the incoming mapping, so later changes to the source
    dict do not leak into a running evaluator. Room order is preserved.
    """

    policies: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "policies", _freeze_policies(self.policies))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "PolicyTable":
        if not isinstance(raw, Mapping):
            raise PolicyConfigurationError("policy table must be an object of room -> policy")

        parsed: Dict[str, RoomPolicy] = {}
        for room, policy in raw.items():
            if not isinstance(room, str) or room == "":
                raise PolicyConfigurationError("room identifiers must be non-empty strings")
            parsed[room] = RoomPolicy.from_mapping(policy, room=room)
        return cls(policies=parsed)

    def get(self, room: str) -> Optional[RoomPolicy]:
        return self.policies.get(room)

    def rooms(self) -> list:
        return list(self.policies.keys())

    def __contains__(self, room: object) -> bool:
        return room in self.policies

    def __iter__(self) -> Iterator[str]:
        return iter(self.policies)

    def __len__(self) -> int:
        return len(self.policies)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {room: policy.to_dict() for room, policy in self.policies.items()}
