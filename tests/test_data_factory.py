"""
Unit Tests for the LLM scenario generator (Gemini client mocked)
"""
import json
from types import SimpleNamespace

import pytest

from generators import data_factory
from generators.data_factory import DataGenerator


SCENARIO_JSON = {
    "budget_max": 800,
    "resources": [
        {"name": "PCR Lab", "total_capacity": 40, "setup_cost": 300},
        {"name": "Imaging", "total_capacity": 20, "setup_cost": 0},
    ],
    "conditions": [
        {"name": "Sepsis", "criticality": 90, "survivability": 60},
        {"name": "Flu", "criticality": 20, "survivability": 90},
    ],
    "tests": [
        {"name": "Culture", "condition_id": 0, "explicit_cost": 120,
         "positivity_probability": 0.4, "immediate_demand": [6, 0]},
        {"name": "Rapid antigen", "condition_id": 7, "explicit_cost": 15,
         "positivity_probability": 0.2, "immediate_demand": [1]},
        {"name": "Broken", "condition_id": 1, "explicit_cost": 15,
         "positivity_probability": 3.0, "immediate_demand": [1, 1]},
    ],
}


class FakeModel:
    def __init__(self, text):
        self.text = text

    def generate_content(self, prompt, generation_config=None):
        return SimpleNamespace(
            text=self.text,
            usage_metadata=SimpleNamespace(prompt_token_count=1000, candidates_token_count=2000),
        )


class ExplodingModel:
    def generate_content(self, prompt, generation_config=None):
        raise RuntimeError("quota exceeded")


@pytest.fixture
def generator(monkeypatch):
    monkeypatch.setattr(data_factory.genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(data_factory.genai, "GenerationConfig", lambda **kwargs: kwargs)
    monkeypatch.setattr(data_factory.genai, "GenerativeModel", lambda name: FakeModel(""))
    return DataGenerator(api_key="test-key")


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
        DataGenerator()


class TestParsing:
    def test_strips_markdown_fences(self, generator):
        raw = "```json\n" + json.dumps(SCENARIO_JSON) + "\n```"
        assert generator._robust_parse_json(raw)["budget_max"] == 800

    def test_extracts_object_from_prose(self, generator):
        raw = "Here you go: " + json.dumps({"scenario": SCENARIO_JSON}) + " Enjoy."
        assert generator._robust_parse_json(raw)["budget_max"] == 800

    @pytest.mark.parametrize("raw", ["", "not json at all", "[1, 2, 3]"])
    def test_garbage_yields_empty(self, generator, raw):
        assert generator._robust_parse_json(raw) == {}


class TestBuildScenario:
    def test_normalises_generated_data(self, generator):
        scenario = generator._build_scenario(SCENARIO_JSON)

        assert scenario.budget_max == 800.0
        assert [r.id for r in scenario.resources] == [0, 1]
        # Invalid third test dropped; ids reassigned by position
        assert [t.id for t in scenario.tests] == [0, 1]
        # Out-of-range condition coerced to 0, short demand list padded with 0
        assert scenario.tests[1].condition_id == 0
        assert scenario.tests[1].immediate_demand == {0: 1.0, 1: 0.0}

    def test_no_conditions_is_rejected(self, generator):
        assert generator._build_scenario({"budget_max": 10, "tests": []}) is None


class TestGenerateScenario:
    def test_success_tracks_cost(self, generator):
        generator.model = FakeModel(json.dumps(SCENARIO_JSON))
        scenario, cost = generator.generate_scenario(test_count=3, resource_count=2, condition_count=2)

        assert len(scenario.tests) == 2
        assert cost == pytest.approx((1000 * 0.075 + 2000 * 0.30) / 1_000_000)
        assert generator.total_cost == pytest.approx(cost)

    def test_client_failure_returns_none(self, generator):
        generator.model = ExplodingModel()
        assert generator.generate_scenario() == (None, 0.0)
