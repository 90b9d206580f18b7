from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Iterable, List, Optional

from accesssim.core.policy.models import PolicyTable, RoomPolicy
from accesssim.core.timeofday import time_to_minutes

from .context import AccessContext
from .decisions import Decision
from .requests import AccessRequest
from .rules import AccessRule, default_rules
from .state import AccessState
from .summary import Summary, summarize

log = logging.getLogger("accesssim.evaluator")


@dataclass(frozen=True)
class SimulationResult:
    decisions: List[Decision]
    summary: Summary

    def to_dict(self) -> dict:
        return {
            "results": [d.to_dict() for d in self.decisions],
            "summary": self.summary.to_dict(),
        }


class AccessEvaluator:
    """
    Stateful access decision point for one simulation run at a time.

    Invariants
    - Rules run in a fixed order and the first denial wins
    - AccessState changes if and only if a request is granted
    - Batches run in stable requested-time order under an exclusive lock,
      so no other batch interleaves its mutations
    - The policy table is read-only configuration, never part of the state
    """

    def __init__(self, policies: PolicyTable, *, rules: Optional[List[AccessRule]] = None):
        if not isinstance(policies, PolicyTable):
            raise TypeError("policies must be a PolicyTable instance")

        rules = default_rules() if rules is None else list(rules)
        for r in rules:
            if not isinstance(r, AccessRule):
                raise TypeError("rules must contain only AccessRule instances")

        self._policies = policies
        self._rules = rules
        self._state = AccessState()
        self._lock = RLock()

    @property
    def policies(self) -> PolicyTable:
        return self._policies

    @property
    def state(self) -> AccessState:
        return self._state

    # Individual checks, usable without running the full rule chain.

    def has_valid_access_level(self, access_level: int, policy: RoomPolicy) -> bool:
        return access_level >= policy.min_access_level

    def is_room_open(self, request_time: str, policy: RoomPolicy) -> bool:
        requested = time_to_minutes(request_time)
        return policy.open_minutes <= requested <= policy.close_minutes

    def is_in_cooldown(
        self, employee_id: str, room: str, request_time: str, cooldown_minutes: int
    ) -> bool:
        last = self._state.last_granted(employee_id, room)
        if last is None:
            return False
        return time_to_minutes(request_time) - last < cooldown_minutes

    def record_access(self, employee_id: str, room: str, access_time: str) -> None:
        self._state.record(employee_id, room, time_to_minutes(access_time))

    def evaluate(self, request: AccessRequest) -> Decision:
        """Decide one request against the current state, recording it if granted."""

        if not isinstance(request, AccessRequest):
            raise TypeError("request must be an AccessRequest instance")

        with self._lock:
            context = AccessContext.build(
                request=request, policies=self._policies, state=self._state
            )
            for rule in self._rules:
                denial = rule.evaluate(context)
                if denial is not None:
                    log.debug(
                        "access denied",
                        extra={
                            "employee_id": request.employee_id,
                            "room": request.room,
                            "rule_id": rule.rule_id,
                            "denial_kind": denial.kind.value,
                        },
                    )
                    return Decision.deny(request, denial)

            self._state.record(request.employee_id, request.room, request.requested_minutes)
            log.debug(
                "access granted",
                extra={"employee_id": request.employee_id, "room": request.room},
            )
            return Decision.grant(request)

    def evaluate_batch(self, requests: Iterable[AccessRequest]) -> List[Decision]:
        """Evaluate requests in chronological order.

        sorted() is stable, so requests with equal times keep their input
        order. Output order is processing order, not input order. State is
        not reset here; see simulate().
        """

        ordered = sorted(requests, key=lambda r: r.requested_minutes)
        with self._lock:
            decisions = [self.evaluate(r) for r in ordered]
        log.info(
            "batch evaluated",
            extra={
                "requests": len(decisions),
                "granted": sum(1 for d in decisions if d.granted),
            },
        )
        return decisions

    def reset(self) -> None:
        """Forget all recorded grants."""
        with self._lock:
            self._state.clear()

    def summarize(self, decisions: Iterable[Decision]) -> Summary:
        return summarize(decisions)

    def simulate(self, requests: Iterable[AccessRequest]) -> SimulationResult:
        """Run one independent simulation: reset, evaluate, summarize."""

        with self._lock:
            self.reset()
            decisions = self.evaluate_batch(requests)
        return SimulationResult(decisions=decisions, summary=summarize(decisions))


def run_simulation(policies: PolicyTable, requests: Iterable[AccessRequest]) -> SimulationResult:
    """Simulate a batch on a fresh evaluator, isolated from every other run."""

    return AccessEvaluator(policies).simulate(requests)
