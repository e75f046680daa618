"""
Hard Constraint Validation Logic.

This module answers the binary question: "Can Test X be committed right now?"
Two independent checks must both pass before the allocator commits:
1. Feasibility: no resource is overdrawn today or over-committed for the next horizon.
2. Affordability: the running spend plus the test's marginal cost stays within budget.
"""

from typing import Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass

from models import Resource

if TYPE_CHECKING:
    from .state import ResourceLedger, CandidateAssessment


@dataclass
class ConstraintViolation:
    """Detailed reason for rejection."""
    constraint_type: str  # "Capacity", "FutureCapacity" or "Budget"
    reason: str
    test_id: int
    resource_id: Optional[int] = None


class FeasibilityChecker:
    """
    Validates capacity constraints for a candidate test. Never mutates state.
    """

    def __init__(self, resources: List[Resource]):
        # Keep input order; checks walk resources in that order
        self.resources = list(resources)

    def check(
        self,
        assessment: "CandidateAssessment",
        ledgers: Dict[int, "ResourceLedger"]
    ) -> Optional[ConstraintViolation]:
        """
        Master validation function. Returns None if feasible, the first violation otherwise.
        """
        test = assessment.test
        for resource in self.resources:
            ledger = ledgers[resource.id]

            # 1. Cannot overdraw what is left in this time slice
            demand = test.demand_for(resource.id)
            if ledger.remaining_capacity < demand:
                return ConstraintViolation(
                    "Capacity",
                    f"Resource {resource.id} has {ledger.remaining_capacity:.2f} left, needs {demand:.2f}",
                    test.id, resource.id
                )

            # 2. Projected commitments are measured against TOTAL capacity, not remaining
            future = assessment.future_demand.get(resource.id, 0.0)
            if resource.total_capacity < ledger.future_demand_committed + future:
                return ConstraintViolation(
                    "FutureCapacity",
                    f"Resource {resource.id} future demand {ledger.future_demand_committed + future:.2f} "
                    f"exceeds capacity {resource.total_capacity:.2f}",
                    test.id, resource.id
                )

        return None

    def is_feasible(self, assessment: "CandidateAssessment", ledgers: Dict[int, "ResourceLedger"]) -> bool:
        return self.check(assessment, ledgers) is None


def check_budget(
    assessment: "CandidateAssessment",
    total_cost_spent: float,
    budget_max: float
) -> Optional[ConstraintViolation]:
    """Affordability check, kept separate from feasibility."""
    if total_cost_spent + assessment.marginal_cost <= budget_max:
        return None
    return ConstraintViolation(
        "Budget",
        f"Budget exceeded: {total_cost_spent:.2f} + {assessment.marginal_cost:.2f} > {budget_max:.2f}",
        assessment.test.id
    )
