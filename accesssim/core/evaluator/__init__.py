"""Access decision engine.

Evaluates batches of room-access requests against a read-only policy table,
tracking per (employee, room) cooldowns for the duration of one run.
"""

from .decisions import Decision, Denial, DenialKind
from .evaluator import AccessEvaluator, SimulationResult, run_simulation
from .requests import AccessRequest, parse_batch
from .state import AccessState
from .summary import Summary, reason_category, summarize

__all__ = [
    "AccessEvaluator",
    "AccessRequest",
    "AccessState",
    "Decision",
    "Denial",
    "DenialKind",
    "SimulationResult",
    "Summary",
    "parse_batch",
    "reason_category",
    "run_simulation",
    "summarize",
]
