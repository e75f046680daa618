"""
Packaged example dataset: two resources, three conditions, five tests, $1000 budget.
"""

from models import Condition, DiagnosticTest, Resource, Scenario


def build_preset_scenario() -> Scenario:
    conditions = [
        Condition(id=0, name="Condition 0", criticality=80.0, survivability=70.0),
        Condition(id=1, name="Condition 1", criticality=20.0, survivability=95.0),
        Condition(id=2, name="Condition 2", criticality=50.0, survivability=10.0),
    ]

    resources = [
        Resource(id=0, name="Resource 0", total_capacity=50.0, setup_cost=500.0),
        Resource(id=1, name="Resource 1", total_capacity=30.0, setup_cost=0.0),
    ]

    # (id, condition, explicit cost, P_Pos, demand on resource 0, demand on resource 1)
    rows = [
        (0, 0, 100.0, 0.80, 10.0, 0.0),
        (1, 1, 50.0, 0.10, 5.0, 0.0),
        (2, 1, 150.0, 0.15, 15.0, 0.0),
        (3, 2, 200.0, 0.90, 20.0, 0.0),
        (4, 0, 50.0, 0.50, 5.0, 0.0),
    ]
    tests = [
        DiagnosticTest(
            id=test_id,
            name=f"Test {test_id}",
            condition_id=condition_id,
            explicit_cost=cost,
            positivity_probability=p_pos,
            immediate_demand={0: d0, 1: d1},
        )
        for test_id, condition_id, cost, p_pos, d0, d1 in rows
    ]

    return Scenario(budget_max=1000.0, conditions=conditions, resources=resources, tests=tests)
