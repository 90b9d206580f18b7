from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from accesssim.core.timeofday import format_minutes

from .context import AccessContext
from .decisions import Denial, DenialKind


class AccessRule:
    """A single check. Returns a Denial when the request fails it, else None."""

    rule_id: str = "access-rule"

    def evaluate(self, context: AccessContext) -> Optional[Denial]:
        raise NotImplementedError


@dataclass(frozen=True)
class RoomExistsRule(AccessRule):
    rule_id: str = "room-exists"

    def evaluate(self, context: AccessContext) -> Optional[Denial]:
        if context.policy is not None:
            return None
        return Denial(DenialKind.UNKNOWN_ROOM, {"room": context.request.room})


@dataclass(frozen=True)
class AccessLevelRule(AccessRule):
    rule_id: str = "access-level"

    def evaluate(self, context: AccessContext) -> Optional[Denial]:
        policy = context.policy
        actual = context.request.access_level
        if actual >= policy.min_access_level:
            return None
        return Denial(
            DenialKind.INSUFFICIENT_ACCESS_LEVEL,
            {"required": policy.min_access_level, "actual": actual},
        )


@dataclass(frozen=True)
class OperatingHoursRule(AccessRule):
    """Both ends of the window are inclusive."""

    rule_id: str = "operating-hours"

    def evaluate(self, context: AccessContext) -> Optional[Denial]:
        policy = context.policy
        requested = context.request.requested_minutes
        if policy.open_minutes <= requested <= policy.close_minutes:
            return None
        return Denial(
            DenialKind.ROOM_CLOSED,
            {
                "open_time": policy.open_time,
                "close_time": policy.close_time,
                "requested_time": context.request.requested_time,
            },
        )


@dataclass(frozen=True)
class CooldownRule(AccessRule):
    """
    Deny while fewer than cooldown_minutes have passed since the pair's last
    grant. Plain subtraction: no wrap-around at midnight.
    """

    rule_id: str = "cooldown"

    def evaluate(self, context: AccessContext) -> Optional[Denial]:
        last = context.last_granted_minutes
        if last is None:
            return None

        cooldown = context.policy.cooldown_minutes
        if context.request.requested_minutes - last >= cooldown:
            return None
        return Denial(
            DenialKind.COOLDOWN_ACTIVE,
            {"last_access": format_minutes(last), "cooldown": cooldown},
        )


def default_rules() -> List[AccessRule]:
    """The four checks in precedence order. Later rules assume a policy exists."""

    return [RoomExistsRule(), AccessLevelRule(), OperatingHoursRule(), CooldownRule()]
