"""
Data models package for the Triage Resource Allocator.

This package exports the core pillars of the data architecture:
1. Demand (DiagnosticTest, Condition)
2. Supply (Resource)
3. Input & Policy (Scenario, AllocationPolicy)
4. Output (AllocationReport, DiagnosticOutcome, DeferredTest)
"""

from .condition import Condition

from .resource import Resource

from .diagnostic import DiagnosticTest

from .policy import AllocationPolicy

from .scenario import Scenario

from .report import (
    AllocationPhase,
    AllocationReport,
    DeferredTest,
    DiagnosticOutcome
)

__all__ = [
    # --- Demand Models ---
    "Condition",
    "DiagnosticTest",

    # --- Supply Models ---
    "Resource",

    # --- Input & Policy ---
    "AllocationPolicy",
    "Scenario",

    # --- Output Models ---
    "AllocationPhase",
    "AllocationReport",
    "DeferredTest",
    "DiagnosticOutcome",
]
