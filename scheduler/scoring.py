"""
Triage Priority Scoring for the allocator.

TPS = (W_Crit x W_Surv) / (marginal cost + immediate demand on resource 0)

Only the reference resource (the first configured one) contributes a
time-demand term; it is treated as the bottleneck. A non-positive
denominator yields a score of 0 instead of an error.
"""

from typing import Dict, Optional, TYPE_CHECKING

from models import Condition, DiagnosticTest

if TYPE_CHECKING:
    from .state import CandidateAssessment


class PriorityScorer:
    """
    Ranks candidate tests by medical utility per unit of cost and bottleneck time.
    """

    def __init__(self, conditions: Dict[int, Condition], reference_resource_id: Optional[int] = None):
        self.conditions = conditions
        self.reference_resource_id = reference_resource_id

    def time_demand(self, test: DiagnosticTest) -> float:
        if self.reference_resource_id is None:
            return 0.0
        return test.demand_for(self.reference_resource_id)

    def calculate_score(self, test: DiagnosticTest, marginal_cost: float) -> float:
        numerator = self.conditions[test.condition_id].utility
        denominator = marginal_cost + self.time_demand(test)
        return numerator / denominator if denominator > 0 else 0.0

    def apply(self, assessment: "CandidateAssessment") -> None:
        """Refresh the score from the assessment's current marginal cost."""
        assessment.priority_score = self.calculate_score(assessment.test, assessment.marginal_cost)
