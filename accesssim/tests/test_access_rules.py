from accesssim.core.evaluator.context import AccessContext
from accesssim.core.evaluator.decisions import DenialKind
from accesssim.core.evaluator.requests import AccessRequest
from accesssim.core.evaluator.rules import (
    AccessLevelRule,
    CooldownRule,
    OperatingHoursRule,
    RoomExistsRule,
    default_rules,
)
from accesssim.core.policy.models import RoomPolicy


def _policy() -> RoomPolicy:
    return RoomPolicy(min_access_level=2, open_minutes=540, close_minutes=1020, cooldown_minutes=15)


def _request(time: str = "09:15", level: int = 2, room: str = "ServerRoom") -> AccessRequest:
    return AccessRequest(employee_id="EMP001", access_level=level, requested_time=time, room=room)


def test_room_exists_rule_denies_missing_policy():
    denial = RoomExistsRule().evaluate(AccessContext(request=_request(room="Attic")))

    assert denial.kind == DenialKind.UNKNOWN_ROOM
    assert denial.reason == "Room 'Attic' not found in system"


def test_room_exists_rule_passes_known_room():
    assert RoomExistsRule().evaluate(AccessContext(request=_request(), policy=_policy())) is None


def test_access_level_rule_reports_required_and_actual():
    assert AccessLevelRule().evaluate(AccessContext(request=_request(level=3), policy=_policy())) is None
    assert AccessLevelRule().evaluate(AccessContext(request=_request(level=2), policy=_policy())) is None

    denial = AccessLevelRule().evaluate(AccessContext(request=_request(level=1), policy=_policy()))
    assert denial.kind == DenialKind.INSUFFICIENT_ACCESS_LEVEL
    assert dict(denial.params) == {"required": 2, "actual": 1}
    assert denial.reason == "Access denied: Insufficient access level (required: 2, has: 1)"


def test_operating_hours_rule_boundaries_are_inclusive():
    rule = OperatingHoursRule()
    for time, open_ in [("10:00", True), ("09:00", True), ("17:00", True), ("08:59", False), ("17:01", False), ("23:00", False)]:
        denial = rule.evaluate(AccessContext(request=_request(time=time), policy=_policy()))
        assert (denial is None) is open_, time


def test_operating_hours_rule_reason_includes_window_and_request():
    denial = OperatingHoursRule().evaluate(AccessContext(request=_request(time="08:00"), policy=_policy()))

    assert denial.kind == DenialKind.ROOM_CLOSED
    assert denial.reason == "Access denied: Room closed (open: 09:00-17:00, requested: 08:00)"


def test_cooldown_rule_ignores_pairs_without_history():
    assert CooldownRule().evaluate(AccessContext(request=_request(), policy=_policy())) is None


def test_cooldown_rule_uses_plain_subtraction():
    rule = CooldownRule()
    ctx = AccessContext(request=_request(time="09:25"), policy=_policy(), last_granted_minutes=555)
    denial = rule.evaluate(ctx)

    assert denial.kind == DenialKind.COOLDOWN_ACTIVE
    assert denial.reason == "Access denied: Cooldown period active (last access: 09:15, cooldown: 15 minutes)"

    ctx = AccessContext(request=_request(time="09:30"), policy=_policy(), last_granted_minutes=555)
    assert rule.evaluate(ctx) is None


def test_cooldown_rule_does_not_wrap_past_midnight():
    # 00:05 - 23:55 is -1430 minutes, which is below any cooldown.
    ctx = AccessContext(request=_request(time="00:05"), policy=_policy(), last_granted_minutes=1435)
    denial = CooldownRule().evaluate(ctx)

    assert denial.kind == DenialKind.COOLDOWN_ACTIVE
    assert denial.reason == "Access denied: Cooldown period active (last access: 23:55, cooldown: 15 minutes)"


def test_default_rules_order():
    assert [r.rule_id for r in default_rules()] == [
        "room-exists",
        "access-level",
        "operating-hours",
        "cooldown",
    ]
