"""
Pytest Configuration and Fixtures

Shared fixtures for the triage allocator tests.
"""
import random
import sys
from pathlib import Path
from typing import Sequence

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import Condition, DiagnosticTest, Resource, Scenario
from generators.preset import build_preset_scenario


def make_scenario(
    budget: float,
    conditions: Sequence[tuple],
    resources: Sequence[tuple],
    tests: Sequence[tuple],
) -> Scenario:
    """
    Compact scenario builder.
    conditions: (criticality, survivability); ids by position
    resources:  (total_capacity, setup_cost); ids by position
    tests:      (id, condition_id, explicit_cost, p_pos, [demand per resource])
    """
    return Scenario(
        budget_max=budget,
        conditions=[Condition(id=k, criticality=c, survivability=s) for k, (c, s) in enumerate(conditions)],
        resources=[Resource(id=j, total_capacity=cap, setup_cost=setup) for j, (cap, setup) in enumerate(resources)],
        tests=[
            DiagnosticTest(
                id=test_id,
                condition_id=condition_id,
                explicit_cost=cost,
                positivity_probability=p_pos,
                immediate_demand={j: d for j, d in enumerate(demand)},
            )
            for test_id, condition_id, cost, p_pos, demand in tests
        ],
    )


def random_scenario(seed: int, num_tests: int = 40, num_resources: int = 3, num_conditions: int = 6) -> Scenario:
    """Reproducible scenario with enough pressure that both capacity and budget bind."""
    rng = random.Random(seed)
    conditions = [(rng.uniform(1, 100), rng.uniform(1, 100)) for _ in range(num_conditions)]
    resources = [(rng.uniform(5, 60), rng.choice([0.0, 0.0, rng.uniform(50, 400)])) for _ in range(num_resources)]
    tests = [
        (
            i,
            rng.randrange(num_conditions),
            rng.uniform(5, 300),
            rng.random(),
            [rng.choice([0.0, rng.uniform(0, 12)]) for _ in range(num_resources)],
        )
        for i in range(num_tests)
    ]
    return make_scenario(rng.uniform(500, 3000), conditions, resources, tests)


@pytest.fixture
def preset_scenario() -> Scenario:
    """The packaged five-test example."""
    return build_preset_scenario()


@pytest.fixture
def no_resource_scenario() -> Scenario:
    """Three tests, no resources: only the budget can block a test."""
    return make_scenario(
        budget=35.0,
        conditions=[(10.0, 10.0)],
        resources=[],
        tests=[
            (0, 0, 10.0, 0.5, []),
            (1, 0, 20.0, 0.5, []),
            (2, 0, 50.0, 0.5, []),
        ],
    )
