"""
Diagnostic test data model for the Triage Resource Allocator.

This is the 'Demand' side: a candidate test that is either scheduled in the
current time slice or deferred.
"""

from typing import Dict
from pydantic import BaseModel, Field, field_validator, ConfigDict


class DiagnosticTest(BaseModel):
    """
    A candidate diagnostic test awaiting a scheduling decision.
    Derived values (future demand, marginal cost, priority score) are computed
    per run by the scheduler and are not stored on the model.
    """

    # --- Core Identity ---
    id: int = Field(ge=0, description="Stable identifier, survives sorting into candidate pools")
    name: str = Field(default="", description="Optional human-readable label")
    condition_id: int = Field(ge=0, description="Condition this test screens for")

    # --- Cost & Likelihood ---
    explicit_cost: float = Field(ge=0.0, description="C_Explicit: direct monetary cost if scheduled")
    positivity_probability: float = Field(
        ge=0.0,
        le=1.0,
        description="P_Pos: prevalence / likelihood of a positive result"
    )

    # --- Resource Consumption ---
    immediate_demand: Dict[int, float] = Field(
        default_factory=dict,
        description="Units consumed per resource id if scheduled (missing ids mean 0)"
    )

    @field_validator('immediate_demand')
    @classmethod
    def validate_demand(cls, v: Dict[int, float]) -> Dict[int, float]:
        for resource_id, units in v.items():
            if units < 0:
                raise ValueError(f"Immediate demand on resource {resource_id} cannot be negative")
        return v

    def demand_for(self, resource_id: int) -> float:
        """Immediate demand on a single resource."""
        return self.immediate_demand.get(resource_id, 0.0)

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": 0,
            "name": "Blood culture panel",
            "condition_id": 0,
            "explicit_cost": 100.0,
            "positivity_probability": 0.8,
            "immediate_demand": {"0": 10.0, "1": 0.0}
        }
    })
