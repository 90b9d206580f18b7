from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

from accesssim.core.evaluator.requests import AccessRequest, parse_batch
from accesssim.core.policy.exceptions import InvalidBatchError, PolicyConfigurationError
from accesssim.core.policy.models import PolicyTable

DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DEFAULT_ROOMS_PATH = DATA_DIR / "rooms.json"
DEFAULT_EMPLOYEES_PATH = DATA_DIR / "employees.json"


def _read_json(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    return json.loads(text)


def load_policy_table(path: Optional[str] = None) -> PolicyTable:
    """Load a room policy table from JSON.

    Schema

    {
      "ServerRoom": {"minAccessLevel": 2, "openTime": "09:00",
                     "closeTime": "11:00", "cooldown": 15},
      ...
    }

    Treat policy files as trusted configuration. Falls back to the bundled
    table when path is None.
    """

    p = Path(path) if path else DEFAULT_ROOMS_PATH
    try:
        data = _read_json(p)
    except json.JSONDecodeError as e:
        raise PolicyConfigurationError(f"{p}: invalid JSON: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("rooms"), dict):
        data = data["rooms"]
    return PolicyTable.from_mapping(data)


def load_request_batch(path: Optional[str] = None) -> List[AccessRequest]:
    """Load and validate a request batch from JSON.

    Accepts either a top-level array of requests or an object with an
    "employees" array, matching the POST /api/simulate body.
    """

    p = Path(path) if path else DEFAULT_EMPLOYEES_PATH
    try:
        data = _read_json(p)
    except json.JSONDecodeError as e:
        raise InvalidBatchError(f"{p}: invalid JSON: {e}") from e

    if isinstance(data, dict) and "employees" in data:
        data = data["employees"]
    return parse_batch(data)


def load_raw_batch(path: Optional[str] = None) -> List[Any]:
    """Return the batch file contents as plain JSON values (for echoing back)."""

    p = Path(path) if path else DEFAULT_EMPLOYEES_PATH
    data = _read_json(p)
    if isinstance(data, dict) and "employees" in data:
        data = data["employees"]
    if not isinstance(data, list):
        raise InvalidBatchError(f"{p}: expected a JSON array of requests")
    return data


def default_policy_table() -> PolicyTable:
    return load_policy_table(None)


def default_request_batch() -> List[AccessRequest]:
    return load_request_batch(None)
