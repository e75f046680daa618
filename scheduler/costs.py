"""
Cost projection for candidate tests.

Fills in the two cost-side derived fields of a test assessment:
the future demand it projects onto the next planning horizon, and
its marginal monetary cost given which resources are already switched on.
"""

from typing import Dict, List, TYPE_CHECKING

from models import DiagnosticTest, Resource

if TYPE_CHECKING:
    from .state import ResourceLedger, CandidateAssessment


class CostProjector:
    """
    Computes future demand and marginal cost. Reads ledgers, never writes them.
    """

    def __init__(self, resources: List[Resource], horizon_factor: float = 1.0):
        self.resources = list(resources)
        self.horizon_factor = horizon_factor

    def project_future_demand(self, test: DiagnosticTest) -> Dict[int, float]:
        """
        Every resource receives the same projection, P_Pos x horizon,
        regardless of what the test actually consumes today.
        """
        projected = test.positivity_probability * self.horizon_factor
        return {resource.id: projected for resource in self.resources}

    def marginal_cost(self, test: DiagnosticTest, ledgers: Dict[int, "ResourceLedger"]) -> float:
        """
        Explicit cost plus the setup cost of EVERY resource not yet switched on,
        including resources this test does not use.
        """
        cost = test.explicit_cost
        for resource in self.resources:
            if resource.requires_setup and not ledgers[resource.id].utilized:
                cost += resource.setup_cost
        return cost

    def apply(self, assessment: "CandidateAssessment", ledgers: Dict[int, "ResourceLedger"]) -> None:
        """Write both derived fields onto the assessment. Idempotent for unchanged ledgers."""
        assessment.future_demand = self.project_future_demand(assessment.test)
        assessment.marginal_cost = self.marginal_cost(assessment.test, ledgers)
