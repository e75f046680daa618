"""
Unit Tests for cost projection and priority scoring
"""
import pytest

from models import Condition
from scheduler import AllocationState, CostProjector, PriorityScorer
from conftest import make_scenario


@pytest.fixture
def two_setup_scenario():
    """Resource 1 carries a setup cost that test 0 never uses."""
    return make_scenario(
        budget=1000.0,
        conditions=[(10.0, 5.0)],
        resources=[(10.0, 0.0), (10.0, 300.0)],
        tests=[(0, 0, 40.0, 0.25, [2.0, 0.0])],
    )


class TestCostProjector:
    def test_future_demand_is_uniform_across_resources(self, preset_scenario):
        projector = CostProjector(preset_scenario.resources)
        test = preset_scenario.tests[0]
        # Resource 1 gets the same projection although the test consumes none of it
        assert projector.project_future_demand(test) == {0: 0.8, 1: 0.8}

    def test_horizon_factor_scales_projection(self, preset_scenario):
        projector = CostProjector(preset_scenario.resources, horizon_factor=2.0)
        assert projector.project_future_demand(preset_scenario.tests[4]) == {0: 1.0, 1: 1.0}

    def test_marginal_cost_includes_setup_of_unused_resources(self, two_setup_scenario):
        """
        Preserved behaviour: every idle resource's setup cost is added,
        even for resources the test does not consume.
        """
        state = AllocationState(two_setup_scenario)
        projector = CostProjector(two_setup_scenario.resources)
        assert projector.marginal_cost(two_setup_scenario.tests[0], state.ledgers) == 340.0

    def test_marginal_cost_drops_once_resource_is_utilized(self, two_setup_scenario):
        state = AllocationState(two_setup_scenario)
        state.ledgers[1].utilized = True
        projector = CostProjector(two_setup_scenario.resources)
        assert projector.marginal_cost(two_setup_scenario.tests[0], state.ledgers) == 40.0


class TestPriorityScorer:
    def test_score_formula(self, preset_scenario):
        scorer = PriorityScorer(preset_scenario.condition_map(), reference_resource_id=0)
        # 5600 / (600 + 10)
        assert scorer.calculate_score(preset_scenario.tests[0], 600.0) == pytest.approx(9.1803, rel=1e-4)

    def test_only_reference_resource_counts(self):
        scenario = make_scenario(100.0, [(10.0, 10.0)], [(10.0, 0.0), (10.0, 0.0)],
                                 [(0, 0, 10.0, 0.5, [0.0, 90.0])])
        scorer = PriorityScorer(scenario.condition_map(), reference_resource_id=0)
        assert scorer.calculate_score(scenario.tests[0], 10.0) == pytest.approx(10.0)

    def test_zero_denominator_scores_zero(self):
        scorer = PriorityScorer({0: Condition(id=0, criticality=5.0, survivability=5.0)})
        scenario = make_scenario(0.0, [(5.0, 5.0)], [], [(0, 0, 0.0, 0.5, [])])
        assert scorer.calculate_score(scenario.tests[0], 0.0) == 0.0

    def test_no_resources_means_no_time_demand(self, no_resource_scenario):
        scorer = PriorityScorer(no_resource_scenario.condition_map(), reference_resource_id=None)
        assert scorer.time_demand(no_resource_scenario.tests[0]) == 0.0
        assert scorer.calculate_score(no_resource_scenario.tests[0], 10.0) == pytest.approx(10.0)


def test_scoring_is_idempotent(preset_scenario):
    state = AllocationState(preset_scenario)
    projector = CostProjector(preset_scenario.resources)
    scorer = PriorityScorer(preset_scenario.condition_map(), reference_resource_id=0)

    snapshots = []
    for _ in range(2):
        for assessment in state.assessments.values():
            projector.apply(assessment, state.ledgers)
            scorer.apply(assessment)
        snapshots.append({
            tid: (dict(a.future_demand), a.marginal_cost, a.priority_score)
            for tid, a in state.assessments.items()
        })

    assert snapshots[0] == snapshots[1]
