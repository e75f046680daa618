"""
Report data models for the Triage Resource Allocator.

This module defines the 'Output' of the allocator: the scheduled/deferred
partition and the run-level metrics handed to the output collaborator.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class AllocationPhase(str, Enum):
    """Which pass of the allocator committed a test."""
    EQUITY = "Equity"
    UTILITY = "Utility"


class DiagnosticOutcome(BaseModel):
    """Final decision for one candidate test."""

    test_id: int
    condition_id: int
    priority_score: float = Field(description="Final TPS (as last computed in the run)")
    scheduled: bool
    phase: Optional[AllocationPhase] = Field(default=None, description="Set only when scheduled")


class DeferredTest(BaseModel):
    """A test left unscheduled at the end of the run."""
    test_id: int
    condition_id: int
    priority_score: float
    reason: Optional[str] = Field(default=None, description="Most recent skip reason, if it was ever tried")


class AllocationReport(BaseModel):
    """
    Everything the output layer needs after a run.
    """
    outcomes: List[DiagnosticOutcome]

    total_cost_spent: float
    budget_max: float
    total_utility_achieved: float

    equity_count: int
    equity_target: int

    # None when no resource is configured
    primary_utilization_pct: Optional[float] = None

    deferred: List[DeferredTest] = Field(default_factory=list)

    @property
    def equity_passed(self) -> bool:
        return self.equity_count >= self.equity_target

    @property
    def scheduled_ids(self) -> List[int]:
        return [o.test_id for o in self.outcomes if o.scheduled]

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "outcomes": [
                {"test_id": 1, "condition_id": 1, "priority_score": 3.42,
                 "scheduled": True, "phase": "Equity"}
            ],
            "total_cost_spent": 850.0,
            "budget_max": 1000.0,
            "total_utility_achieved": 15000.0,
            "equity_count": 1,
            "equity_target": 7,
            "primary_utilization_pct": 70.0,
            "deferred": [
                {"test_id": 3, "condition_id": 2, "priority_score": 2.27,
                 "reason": "Resource 0 has 15.00 left, needs 20.00"}
            ]
        }
    })
