from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ApiError(BaseModel):
    """Standard API error payload."""

    error: str
    detail: Optional[str] = None


class RoomPolicyOut(BaseModel):
    """One room's rules, in wire form."""

    minAccessLevel: int
    openTime: str
    closeTime: str
    cooldown: int


class SimulateIn(BaseModel):
    """Simulation request body.

    employees is validated by the batch parser, not by pydantic, so a
    missing or non-list value produces the standard "Invalid employee data"
    error instead of a schema error.
    """

    employees: Any = None


class DecisionOut(BaseModel):
    employeeId: str
    room: str
    requestTime: str
    granted: bool
    reason: str


class SummaryOut(BaseModel):
    totalRequests: int
    grantedRequests: int
    deniedRequests: int
    successRate: str
    denialReasons: Dict[str, int] = Field(default_factory=dict)


class SimulateOut(BaseModel):
    """Decisions in processing order plus the batch summary."""

    results: List[DecisionOut]
    summary: SummaryOut


class SimulateDefaultOut(SimulateOut):
    """Simulation of the configured sample batch, echoing the batch back."""

    employeeData: List[Dict[str, Any]] = Field(default_factory=list)
