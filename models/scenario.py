"""
Scenario model: the complete, validated input to one allocation run.

The input collaborators (preset dataset, console prompts, generator) are
responsible for coercing bad references before building a Scenario; the
validators here only reject what the allocator cannot work with.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from .condition import Condition
from .resource import Resource
from .diagnostic import DiagnosticTest


class Scenario(BaseModel):
    """Conditions, resources, candidate tests and the budget ceiling for one time slice."""

    budget_max: float = Field(ge=0.0, description="B_Max: spending ceiling for the time slice")
    conditions: List[Condition] = Field(default_factory=list)
    resources: List[Resource] = Field(
        default_factory=list,
        description="Ordered; the first resource is the bottleneck reference"
    )
    tests: List[DiagnosticTest] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_references(self):
        """Ensure ids are unique and every test points at known entities."""
        for label, items in (("Condition", self.conditions),
                             ("Resource", self.resources),
                             ("Test", self.tests)):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)):
                raise ValueError(f"{label} ids must be unique")

        condition_ids = {c.id for c in self.conditions}
        resource_ids = {r.id for r in self.resources}
        for test in self.tests:
            if test.condition_id not in condition_ids:
                raise ValueError(f"Test {test.id} references unknown condition {test.condition_id}")
            unknown = set(test.immediate_demand) - resource_ids
            if unknown:
                raise ValueError(f"Test {test.id} has demand on unknown resources {sorted(unknown)}")
        return self

    @property
    def reference_resource(self) -> Optional[Resource]:
        """Resource 0: the only resource whose demand enters the priority score."""
        return self.resources[0] if self.resources else None

    def condition_map(self):
        return {c.id: c for c in self.conditions}
