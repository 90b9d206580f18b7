from __future__ import annotations

import argparse
import json
import sys
from typing import List

from accesssim.core.evaluator import AccessEvaluator, SimulationResult
from accesssim.core.policy.exceptions import AccessSimError
from accesssim.core.policy.loader import load_policy_table, load_request_batch
from accesssim.core.policy.models import PolicyTable


def _print_json(obj: object) -> None:
    print(json.dumps(obj, indent=2, sort_keys=False, default=str))


def _render_result(result: SimulationResult) -> str:
    """Plain-text table of decisions followed by the summary."""

    lines: List[str] = []
    header = f"{'EMPLOYEE':<10} {'TIME':<6} {'ROOM':<14} {'RESULT':<8} REASON"
    lines.append(header)
    lines.append("-" * len(header))
    for d in result.decisions:
        status = "GRANTED" if d.granted else "DENIED"
        lines.append(f"{d.employee_id:<10} {d.request_time:<6} {d.room:<14} {status:<8} {d.reason}")

    s = result.summary
    lines.append("")
    lines.append(
        f"Total: {s.total_requests}  Granted: {s.granted_requests}  "
        f"Denied: {s.denied_requests}  Success rate: {s.success_rate}"
    )
    for category, count in s.denial_reasons.items():
        lines.append(f"  {count:>4}  {category}")
    return "\n".join(lines)


def _render_rooms(policies: PolicyTable) -> str:
    lines = [f"{'ROOM':<14} {'MIN LEVEL':<10} {'HOURS':<12} COOLDOWN"]
    for room in policies:
        p = policies.get(room)
        lines.append(
            f"{room:<14} {p.min_access_level:<10} {p.open_time + '-' + p.close_time:<12} "
            f"{p.cooldown_minutes} min"
        )
    return "\n".join(lines)


def cmd_simulate(args: argparse.Namespace) -> int:
    """Evaluate a request batch file against a room policy table."""

    try:
        policies = load_policy_table(args.rooms)
        requests = load_request_batch(args.batch)
    except (AccessSimError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    result = AccessEvaluator(policies).simulate(requests)
    if args.json:
        _print_json(result.to_dict())
    else:
        print(_render_result(result))
    return 0


def cmd_rooms(args: argparse.Namespace) -> int:
    """Show the room policy table."""

    try:
        policies = load_policy_table(args.rooms)
    except (AccessSimError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.json:
        _print_json(policies.to_dict())
    else:
        print(_render_rooms(policies))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the access simulator API server.

    Binds to 127.0.0.1 by default.
    """

    try:
        import uvicorn
    except ImportError as e:
        print(f"error: uvicorn is required to serve the API: {e}", file=sys.stderr)
        return 2

    from accesssim.api.server import ServiceConfig, create_app, config_from_env

    env_cfg = config_from_env()
    cfg = ServiceConfig(
        rooms_path=args.rooms or env_cfg.rooms_path,
        employees_path=args.employees or env_cfg.employees_path,
        max_batch=env_cfg.max_batch,
        log_level=args.log_level.upper(),
    )
    try:
        app = create_app(cfg)
    except (AccessSimError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    uvicorn.run(app, host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="accesssim", description="Room access policy simulator"
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("simulate", help="Evaluate a batch of access requests")
    sp.add_argument(
        "batch", nargs="?", default=None, help="Path to requests JSON (default: bundled sample)"
    )
    sp.add_argument("--rooms", default=None, help="Path to room policies JSON")
    sp.add_argument("--json", action="store_true", help="Print JSON results and summary")
    sp.set_defaults(func=cmd_simulate)

    rp = sub.add_parser("rooms", help="Show room policies")
    rp.add_argument("--rooms", default=None, help="Path to room policies JSON")
    rp.add_argument("--json", action="store_true", help="Print JSON")
    rp.set_defaults(func=cmd_rooms)

    sv = sub.add_parser("serve", help="Run the FastAPI server")
    sv.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    sv.add_argument("--port", type=int, default=3000, help="Bind port (default: 3000)")
    sv.add_argument("--rooms", default=None, help="Path to room policies JSON")
    sv.add_argument("--employees", default=None, help="Path to sample requests JSON")
    sv.add_argument("--log-level", default="info", help="Log level")
    sv.set_defaults(func=cmd_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
