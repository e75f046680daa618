"""
Tests for the CLI helpers: report rendering and the scenario cache
"""
import json

import run_allocator
from run_allocator import load_cached_scenario, render_report, save_scenario
from scheduler import TriageAllocator


def test_render_preset_report(preset_scenario):
    text = render_report(TriageAllocator(preset_scenario).run().build_report())

    assert "Total Cost Incurred: $850.00 (Max: $1000.00)" in text
    assert "Total Utility Achieved: 15000.00" in text
    assert "Equity Compliance Rate: FAILED" in text
    assert "Resource 0 Utilization Rate (Immediate): 70.00%" in text
    assert "  - Test 3 (Condition 2, TPS: 2.27)" in text


def test_render_without_resources_or_deferrals():
    from conftest import make_scenario

    scenario = make_scenario(100.0, [(2.0, 3.0)], [], [(0, 0, 5.0, 0.1, [])])
    text = render_report(TriageAllocator(scenario).run().build_report())

    assert "Equity Compliance Rate: PASSED" in text
    assert "n/a (no resources)" in text
    assert "  - None." in text


def test_cache_roundtrip(tmp_path, preset_scenario):
    path = tmp_path / "scenario.json"
    save_scenario(preset_scenario, str(path))
    assert load_cached_scenario(str(path)) == preset_scenario


def test_missing_or_invalid_cache(tmp_path):
    assert load_cached_scenario(str(tmp_path / "missing.json")) is None

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"budget_max": -1}))
    assert load_cached_scenario(str(bad)) is None


def test_main_with_preset(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr("builtins.input", lambda _prompt: "1")
    monkeypatch.setattr(run_allocator, "EXPORT_FILENAME", str(tmp_path / "report.json"))

    assert run_allocator.main() == 0
    exported = json.loads((tmp_path / "report.json").read_text())
    assert exported["equity_target"] == 7
    assert "Uncovered Diagnostics (Deferred):" in capsys.readouterr().out


def test_generation_failure_falls_back_to_preset(monkeypatch, tmp_path):
    monkeypatch.setattr("builtins.input", lambda _prompt: "3")
    monkeypatch.setattr(run_allocator, "USE_CACHE", False)
    monkeypatch.setattr(run_allocator, "API_KEY", None)
    monkeypatch.setattr(run_allocator, "EXPORT_FILENAME", str(tmp_path / "report.json"))

    assert run_allocator.main() == 0
    exported = json.loads((tmp_path / "report.json").read_text())
    assert exported["budget_max"] == 1000.0
    assert exported["total_cost_spent"] == 850.0


def test_invalid_choice_exits(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _prompt: "9")
    assert run_allocator.main() == 1
