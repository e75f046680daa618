"""
Tunable constants of the allocation heuristic.
"""

from pydantic import BaseModel, Field, ConfigDict


class AllocationPolicy(BaseModel):
    """Knobs for the two-phase greedy allocator. Defaults match the reference triage policy."""

    # Share of resource 0's capacity reserved (as a test count) for low-priority tests
    equity_fraction: float = Field(default=0.15, ge=0.0, le=1.0)

    # Tests scoring strictly below this are eligible for the equity phase
    low_priority_cutoff: float = Field(default=50.0, ge=0.0)

    # Multiplier projecting positivity probability onto the next planning horizon
    horizon_factor: float = Field(default=1.0, ge=0.0)

    model_config = ConfigDict(frozen=True)
