"""
Allocation State Management.

This module acts as the 'Memory' of one allocation run (the session context).
It owns every field that changes while the allocator works:
1. Per-resource ledgers (remaining capacity, setup status, committed future demand).
2. Per-test assessments (derived cost/score and the scheduled flag).
3. Global running totals, the commit log and the skip log (for the final report).
Nothing in here survives between runs: each run builds a fresh AllocationState.
"""

from typing import List, Dict, Any, Optional
from collections import defaultdict
from dataclasses import dataclass, field

from models import (
    AllocationPhase,
    AllocationReport,
    DeferredTest,
    DiagnosticTest,
    Resource,
    Scenario,
    DiagnosticOutcome,
)
from .constraints import ConstraintViolation


@dataclass
class ResourceLedger:
    """Mutable view of a single resource during a run."""
    resource: Resource
    remaining_capacity: float
    utilized: bool = False
    future_demand_committed: float = 0.0

    @property
    def used_capacity(self) -> float:
        return self.resource.total_capacity - self.remaining_capacity


@dataclass
class CandidateAssessment:
    """Derived, per-run values for a candidate test."""

    test: DiagnosticTest
    future_demand: Dict[int, float] = field(default_factory=dict)
    marginal_cost: float = 0.0
    priority_score: float = 0.0
    scheduled: bool = False
    phase: Optional[AllocationPhase] = None


@dataclass
class CommitRecord:
    """One entry of the commit log."""
    test_id: int
    phase: AllocationPhase
    priority_score: float
    setup_charges: Dict[int, float]
    cost_after: float
    utility_after: float


@dataclass
class SkipRecord:
    """Aggregated reasons a test was passed over."""
    test_id: int
    attempts: int = 0
    violations: List[ConstraintViolation] = field(default_factory=list)


class AllocationState:
    """
    Maintains the mutable state of the allocator during execution.
    Tracks ledgers, commitments and skip logs.
    """

    def __init__(self, scenario: Scenario):
        """Initialize a fresh ledger for the given scenario."""
        self.scenario = scenario
        self.budget_max = scenario.budget_max

        # Ordered like scenario.resources; resource 0 is the reference
        self.ledgers: Dict[int, ResourceLedger] = {
            r.id: ResourceLedger(resource=r, remaining_capacity=r.total_capacity)
            for r in scenario.resources
        }
        self.assessments: Dict[int, CandidateAssessment] = {
            t.id: CandidateAssessment(test=t) for t in scenario.tests
        }
        self._conditions = scenario.condition_map()

        # Global ledger
        self.total_cost_spent: float = 0.0
        self.total_utility_achieved: float = 0.0
        self.equity_count: int = 0
        self.equity_target: int = 0

        # Logs
        self.commits: List[CommitRecord] = []
        self.skipped: Dict[int, SkipRecord] = {}

    # --- Mutation ---

    def commit(self, test_id: int, phase: AllocationPhase) -> CommitRecord:
        """
        Schedule a test and charge its resources.
        The caller must already have confirmed feasibility and affordability.
        """
        assessment = self.assessments[test_id]
        test = assessment.test

        # 1. Mark scheduled
        assessment.scheduled = True
        assessment.phase = phase

        # 2. Consume capacity and future headroom; switch on every idle resource with a setup cost
        setup_charges: Dict[int, float] = {}
        for resource_id, ledger in self.ledgers.items():
            ledger.remaining_capacity -= test.demand_for(resource_id)
            ledger.future_demand_committed += assessment.future_demand.get(resource_id, 0.0)

            if ledger.resource.requires_setup and not ledger.utilized:
                ledger.utilized = True
                self.total_cost_spent += ledger.resource.setup_cost
                setup_charges[resource_id] = ledger.resource.setup_cost

        # 3. Charge the test itself and bank its utility
        self.total_cost_spent += test.explicit_cost
        self.total_utility_achieved += self._conditions[test.condition_id].utility

        if phase == AllocationPhase.EQUITY:
            self.equity_count += 1

        record = CommitRecord(
            test_id=test_id,
            phase=phase,
            priority_score=assessment.priority_score,
            setup_charges=setup_charges,
            cost_after=self.total_cost_spent,
            utility_after=self.total_utility_achieved,
        )
        self.commits.append(record)
        return record

    def record_skip(self, test_id: int, violation: ConstraintViolation) -> None:
        """
        Log a passed-over candidate.
        A test can be skipped once per phase, so reasons are aggregated.
        """
        if test_id not in self.skipped:
            self.skipped[test_id] = SkipRecord(test_id=test_id)
        record = self.skipped[test_id]
        record.attempts += 1
        record.violations.append(violation)

    # --- Query Methods ---

    def unscheduled(self) -> List[CandidateAssessment]:
        """Assessments still awaiting a decision, in input order."""
        return [a for a in self.assessments.values() if not a.scheduled]

    def reference_ledger(self) -> Optional[ResourceLedger]:
        ref = self.scenario.reference_resource
        return self.ledgers[ref.id] if ref else None

    def primary_utilization(self) -> Optional[float]:
        """Percentage of resource 0's capacity consumed; None without resources."""
        ledger = self.reference_ledger()
        if ledger is None:
            return None
        total = ledger.resource.total_capacity
        if total <= 0:
            return 0.0
        return ledger.used_capacity / total * 100.0

    # --- Reporting Methods (Used by Output generators) ---

    def get_statistics(self) -> Dict[str, Any]:
        """Run-level summary for logs and the console report."""
        phase_counts = defaultdict(int)
        for record in self.commits:
            phase_counts[record.phase.value] += 1

        utilization = self.primary_utilization()

        return {
            "total_tests": len(self.assessments),
            "scheduled_count": len(self.commits),
            "deferred_count": len(self.assessments) - len(self.commits),
            "scheduled_by_phase": dict(phase_counts),

            "total_cost_spent": round(self.total_cost_spent, 2),
            "budget_max": self.budget_max,
            "budget_remaining": round(self.budget_max - self.total_cost_spent, 2),
            "total_utility_achieved": round(self.total_utility_achieved, 2),

            "equity_count": self.equity_count,
            "equity_target": self.equity_target,
            "equity_passed": self.equity_count >= self.equity_target,

            "primary_utilization_pct": None if utilization is None else round(utilization, 2),
            "remaining_capacity": {rid: l.remaining_capacity for rid, l in self.ledgers.items()},
            "resources_activated": [rid for rid, l in self.ledgers.items() if l.utilized],
        }

    def get_deferred_report(self) -> List[Dict]:
        """
        Human-readable list of unscheduled tests and why.
        Sorted by test id so the output is stable.
        """
        report = []
        for assessment in sorted(self.unscheduled(), key=lambda a: a.test.id):
            skip = self.skipped.get(assessment.test.id)
            violation_summary = defaultdict(int)
            latest_reason = None
            if skip:
                for v in skip.violations:
                    violation_summary[v.constraint_type] += 1
                latest_reason = skip.violations[-1].reason

            report.append({
                "test_id": assessment.test.id,
                "condition_id": assessment.test.condition_id,
                "priority_score": assessment.priority_score,
                "total_attempts": skip.attempts if skip else 0,
                "violation_breakdown": dict(violation_summary),
                "latest_reason": latest_reason,
            })
        return report

    def build_report(self) -> AllocationReport:
        """Package the final partition and metrics for the output layer."""
        outcomes = [
            DiagnosticOutcome(
                test_id=a.test.id,
                condition_id=a.test.condition_id,
                priority_score=a.priority_score,
                scheduled=a.scheduled,
                phase=a.phase,
            )
            for a in self.assessments.values()
        ]
        deferred = [
            DeferredTest(
                test_id=row["test_id"],
                condition_id=row["condition_id"],
                priority_score=row["priority_score"],
                reason=row["latest_reason"],
            )
            for row in self.get_deferred_report()
        ]
        return AllocationReport(
            outcomes=outcomes,
            total_cost_spent=self.total_cost_spent,
            budget_max=self.budget_max,
            total_utility_achieved=self.total_utility_achieved,
            equity_count=self.equity_count,
            equity_target=self.equity_target,
            primary_utilization_pct=self.primary_utilization(),
            deferred=deferred,
        )
