from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from accesssim.api.middleware import RequestLogMiddleware
from accesssim.api.models import (
    ApiError,
    RoomPolicyOut,
    SimulateDefaultOut,
    SimulateIn,
    SimulateOut,
)
from accesssim.core.evaluator import parse_batch, run_simulation
from accesssim.core.policy.exceptions import InvalidBatchError
from accesssim.core.policy.loader import load_policy_table, load_raw_batch

log = logging.getLogger("accesssim.api")

DEFAULT_MAX_BATCH = 10_000


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Configuration for the API service.

    rooms_path / employees_path of None mean the bundled sample data.
    """

    rooms_path: Optional[str] = None
    employees_path: Optional[str] = None
    max_batch: int = DEFAULT_MAX_BATCH
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad values."""

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        log.warning("ignoring non-integer %s=%r", name, raw)
        return int(default)


def config_from_env() -> ServiceConfig:
    return ServiceConfig(
        rooms_path=os.environ.get("ACCESSSIM_ROOMS_PATH") or None,
        employees_path=os.environ.get("ACCESSSIM_EMPLOYEES_PATH") or None,
        max_batch=max(1, _env_int("ACCESSSIM_MAX_BATCH", DEFAULT_MAX_BATCH)),
        log_level=os.environ.get("ACCESSSIM_LOG_LEVEL", "INFO").upper(),
    )


def _error(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiError(error=error, detail=detail).model_dump(),
    )


def create_app(cfg: Optional[ServiceConfig] = None) -> FastAPI:
    """Create the FastAPI app.

    The policy table is loaded once here and shared read-only. Each
    simulate call runs on its own evaluator, so concurrent requests never
    see each other's cooldown state.
    """

    cfg = cfg or config_from_env()

    log.setLevel(cfg.log_level)
    logging.getLogger("accesssim.evaluator").setLevel(cfg.log_level)

    policies = load_policy_table(cfg.rooms_path)
    log.info("loaded room policies", extra={"rooms": len(policies)})

    app = FastAPI(title="Access Simulator API", version="0.1")
    app.state.cfg = cfg
    app.state.policies = policies

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(InvalidBatchError)
    async def invalid_batch_handler(request: Request, exc: InvalidBatchError) -> JSONResponse:
        log.info("rejected batch: %s", exc)
        return _error(400, "Invalid employee data", str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "Invalid request body", str(exc.errors()))

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "rooms": len(policies)}

    @app.get("/api/rooms", response_model=Dict[str, RoomPolicyOut])
    def rooms() -> Dict[str, Any]:
        return policies.to_dict()

    @app.get("/api/employees")
    def employees():
        try:
            return load_raw_batch(cfg.employees_path)
        except (OSError, ValueError, InvalidBatchError) as e:
            log.warning("failed to load employees: %s", e)
            return _error(500, "Failed to load employees")

    @app.post("/api/simulate", response_model=SimulateOut)
    def simulate(body: SimulateIn) -> Dict[str, Any]:
        requests = parse_batch(body.employees, max_size=cfg.max_batch)
        return run_simulation(policies, requests).to_dict()

    @app.post("/api/simulate-default", response_model=SimulateDefaultOut)
    def simulate_default():
        # The sample batch is server configuration: a bad file is a 500, not a 400.
        try:
            raw = load_raw_batch(cfg.employees_path)
            requests = parse_batch(raw, max_size=cfg.max_batch)
        except (OSError, ValueError, InvalidBatchError) as e:
            log.warning("failed to load employees: %s", e)
            return _error(500, "Failed to load employees")

        out = run_simulation(policies, requests).to_dict()
        out["employeeData"] = raw
        return out

    return app


def app_from_env() -> FastAPI:
    """Factory used by Uvicorn entrypoints (``uvicorn --factory``)."""

    return create_app(config_from_env())
