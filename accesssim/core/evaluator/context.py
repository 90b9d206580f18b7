from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from accesssim.core.policy.models import PolicyTable, RoomPolicy

from .requests import AccessRequest
from .state import AccessState


@dataclass(frozen=True)
class AccessContext:
    """
    Immutable rule input snapshot for one request.

    policy is None when the room is unknown. last_granted_minutes is the
    pair's last grant at the moment of evaluation, or None if there is none.
    """

    request: AccessRequest
    policy: Optional[RoomPolicy] = None
    last_granted_minutes: Optional[int] = None

    @classmethod
    def build(
        cls, *, request: AccessRequest, policies: PolicyTable, state: AccessState
    ) -> "AccessContext":
        return cls(
            request=request,
            policy=policies.get(request.room),
            last_granted_minutes=state.last_granted(request.employee_id, request.room),
        )
