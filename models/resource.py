"""
Resource data model for the Triage Resource Allocator.

This module defines the 'Supply' side of the allocator: shared, capacity-limited
facilities (e.g. an analyser bank or an imaging suite) that tests draw from.
Only the static description lives here; the running ledger for a resource
(remaining capacity, setup status, committed future demand) is owned by the
allocation state.
"""

from pydantic import BaseModel, Field, ConfigDict


class Resource(BaseModel):
    """
    Shared facility with a fixed capacity for the current time slice.
    """
    id: int = Field(ge=0, description="Stable identifier, assigned at load time")
    name: str = Field(default="", description="e.g. 'PCR Lab', 'MRI Suite'")

    total_capacity: float = Field(ge=0.0, description="Cap_Total: units available per time slice")

    # Charged once, the first time any scheduled test switches the resource on
    setup_cost: float = Field(
        default=0.0,
        ge=0.0,
        description="R_SetupCost: one-time activation cost (0 if no setup is needed)"
    )

    @property
    def requires_setup(self) -> bool:
        return self.setup_cost > 0.0

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": 0,
            "name": "PCR Lab",
            "total_capacity": 50.0,
            "setup_cost": 500.0
        }
    })
