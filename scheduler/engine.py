"""
The Triage Allocation Engine.

This module implements the core "Solver" logic for one time slice.
It is a single-pass, irrevocable greedy heuristic in three steps:
0. Scoring Pass - project costs and compute a priority score for every test.
1. Equity Enforcement - guarantee a floor of low-priority tests, cheapest on the bottleneck first.
2. Utility Maximization - fill what is left in descending priority order.
A test is never reconsidered once it has been committed or skipped within a phase.
"""

import logging
import math
from typing import List, Optional

from models import AllocationPhase, AllocationPolicy, Scenario
from .constraints import FeasibilityChecker, check_budget
from .costs import CostProjector
from .scoring import PriorityScorer
from .state import AllocationState, CandidateAssessment

logger = logging.getLogger(__name__)


class TriageAllocator:
    """
    Main allocation engine.
    Ingests a Scenario (demand, supply and budget), outputs an AllocationState.
    """

    def __init__(self, scenario: Scenario, policy: Optional[AllocationPolicy] = None):
        self.scenario = scenario
        self.policy = policy or AllocationPolicy()

        reference = scenario.reference_resource

        # Initialize Helpers
        self.projector = CostProjector(scenario.resources, self.policy.horizon_factor)
        self.scorer = PriorityScorer(
            scenario.condition_map(),
            reference.id if reference else None
        )
        self.checker = FeasibilityChecker(scenario.resources)
        self.state = AllocationState(scenario)

    def run(self) -> AllocationState:
        """
        Execute the allocation pipeline on a fresh ledger.
        """
        self.state = AllocationState(self.scenario)
        logger.info(f"Starting allocation for {len(self.scenario.tests)} tests "
                    f"(budget {self.scenario.budget_max:.2f})")

        # 0. Initial scores: nothing utilized, nothing committed
        self._score(self.state.unscheduled())

        self.state.equity_target = self.equity_target()
        logger.info(f"Equity target (min low-priority slots): {self.state.equity_target}")
        logger.info(f"TPS cutoff for low priority: {self.policy.low_priority_cutoff:.2f}")

        self._run_equity_phase()
        logger.info(f"Equity compliance: {self.state.equity_count} / {self.state.equity_target} met")

        self._run_utility_phase()

        stats = self.state.get_statistics()
        logger.info(f"Allocation finished: {stats['scheduled_count']} scheduled, "
                    f"{stats['deferred_count']} deferred, cost {stats['total_cost_spent']:.2f}")
        return self.state

    def equity_target(self) -> int:
        """floor(equity_fraction x total capacity of resource 0); 0 without resources."""
        reference = self.scenario.reference_resource
        if reference is None:
            return 0
        return math.floor(self.policy.equity_fraction * reference.total_capacity)

    def _score(self, assessments: List[CandidateAssessment]) -> None:
        for assessment in assessments:
            self.projector.apply(assessment, self.state.ledgers)
            self.scorer.apply(assessment)

    def _run_equity_phase(self) -> None:
        """
        Phase 1: least resource-hungry low-priority tests first.
        Scores and marginal costs are NOT refreshed inside the phase.
        """
        pool = [
            a for a in self.state.unscheduled()
            if a.priority_score < self.policy.low_priority_cutoff
        ]
        # Ties on bottleneck demand fall back to ascending test id
        pool.sort(key=lambda a: (self.scorer.time_demand(a.test), a.test.id))

        for assessment in pool:
            if self.state.equity_count >= self.state.equity_target:
                break
            if self._try_commit(assessment, AllocationPhase.EQUITY):
                logger.info(f"  [Equity] Scheduled Test {assessment.test.id} "
                            f"(TPS: {assessment.priority_score:.2f}) Cost: ${self.state.total_cost_spent:.2f}")

    def _run_utility_phase(self) -> None:
        """
        Phase 2: re-score everything still open, then walk in descending TPS.
        """
        pool = self.state.unscheduled()
        # Equity commits may have switched resources on, changing marginal costs
        self._score(pool)
        # Equal scores fall back to ascending test id
        pool.sort(key=lambda a: (-a.priority_score, a.test.id))

        for assessment in pool:
            if self._try_commit(assessment, AllocationPhase.UTILITY):
                logger.info(f"  [Triage] Scheduled Test {assessment.test.id} "
                            f"(TPS: {assessment.priority_score:.2f}) Cost: ${self.state.total_cost_spent:.2f}")

    def _try_commit(self, assessment: CandidateAssessment, phase: AllocationPhase) -> bool:
        """Commit if feasible and affordable; otherwise record the skip."""
        violation = self.checker.check(assessment, self.state.ledgers)
        if violation is None:
            violation = check_budget(assessment, self.state.total_cost_spent, self.state.budget_max)

        if violation is not None:
            logger.debug(f"  [{phase.value}] Skipped Test {assessment.test.id}: {violation.reason}")
            self.state.record_skip(assessment.test.id, violation)
            return False

        self.state.commit(assessment.test.id, phase)
        return True
