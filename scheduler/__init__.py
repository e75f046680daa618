"""
Allocation core: cost projection, priority scoring, feasibility and the two-phase allocator.
"""

from .constraints import ConstraintViolation, FeasibilityChecker, check_budget
from .costs import CostProjector
from .scoring import PriorityScorer
from .state import AllocationState, CommitRecord, ResourceLedger, CandidateAssessment
from .engine import TriageAllocator

__all__ = [
    "AllocationState",
    "CommitRecord",
    "ConstraintViolation",
    "CostProjector",
    "FeasibilityChecker",
    "PriorityScorer",
    "ResourceLedger",
    "CandidateAssessment",
    "TriageAllocator",
    "check_budget",
]
