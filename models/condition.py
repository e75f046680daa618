"""
Condition data model for the Triage Resource Allocator.

A Condition is the health outcome a diagnostic test screens for.
Its two weights are combined multiplicatively into the utility a test earns when scheduled.
"""

from pydantic import BaseModel, Field, ConfigDict


class Condition(BaseModel):
    """A health condition screened for by one or more diagnostic tests."""

    id: int = Field(ge=0, description="Stable identifier, assigned at load time")
    name: str = Field(default="", description="Optional human-readable label")

    criticality: float = Field(ge=0.0, description="W_Crit: how severe a missed diagnosis is")
    survivability: float = Field(ge=0.0, description="W_Surv: how much early detection improves outcome")

    @property
    def utility(self) -> float:
        """Medical utility contributed by scheduling a test for this condition."""
        return self.criticality * self.survivability

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": 0,
            "name": "Sepsis",
            "criticality": 80.0,
            "survivability": 70.0
        }
    })
