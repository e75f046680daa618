"""
Main Execution Script for the Triage Resource Allocator.
Pick an input mode, run the two-phase allocator, print the report and export it as JSON.
"""

import os
import sys
import logging
import json
from typing import Optional

from pydantic import ValidationError

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from generators.console_input import ConsoleInput
from generators.preset import build_preset_scenario
from scheduler.engine import TriageAllocator
from models import AllocationReport, Scenario

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
CACHE_FILENAME = "scenario_cache.json"
USE_CACHE = True  # Set to False to force new AI generation
EXPORT_FILENAME = "allocation_report.json"
API_KEY = os.environ.get("GOOGLE_API_KEY")
# ---------------------


def save_scenario(scenario: Scenario, filename: str) -> None:
    """Helper to save a generated scenario so we don't re-query the LLM every time."""
    with open(filename, 'w') as f:
        json.dump(scenario.model_dump(mode='json'), f, indent=2)
    logger.info(f"💾 Saved scenario to {filename}")


def load_cached_scenario(filename: str) -> Optional[Scenario]:
    """
    Helper to load JSON data and reconstruct the Scenario.
    """
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
        scenario = Scenario(**data)
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning(f"⚠️ Cache file {filename} not found or invalid.")
        return None
    except ValidationError as e:
        logger.error(f"❌ Cached scenario failed validation: {e}")
        return None

    logger.info(f"✅ Cache Loaded: {len(scenario.tests)} tests, {len(scenario.resources)} resources.")
    return scenario


def generate_scenario() -> Optional[Scenario]:
    """Cache first, then Gemini. None if neither works."""
    if USE_CACHE:
        scenario = load_cached_scenario(CACHE_FILENAME)
        if scenario:
            return scenario

    if not API_KEY:
        logger.error("❌ GOOGLE_API_KEY not found. Please set it via 'export GOOGLE_API_KEY=...'")
        return None

    from generators.data_factory import DataGenerator

    generator = DataGenerator(api_key=API_KEY)
    scenario, cost = generator.generate_scenario()
    logger.info(f"💸 Total Estimated LLM Cost: ${cost:.4f}")
    if scenario:
        save_scenario(scenario, CACHE_FILENAME)
    return scenario


def render_report(report: AllocationReport) -> str:
    """Console text for the output collaborator."""
    lines = [
        "",
        "--- System Output Metrics ---",
        f"Total Cost Incurred: ${report.total_cost_spent:.2f} (Max: ${report.budget_max:.2f})",
        f"Total Utility Achieved: {report.total_utility_achieved:.2f}",
        f"Equity Compliance: {report.equity_count} / {report.equity_target} met.",
        f"Equity Compliance Rate: {'PASSED' if report.equity_passed else 'FAILED'}",
    ]
    if report.primary_utilization_pct is None:
        lines.append("Resource 0 Utilization Rate (Immediate): n/a (no resources)")
    else:
        lines.append(f"Resource 0 Utilization Rate (Immediate): {report.primary_utilization_pct:.2f}%")

    lines.append("Uncovered Diagnostics (Deferred):")
    if not report.deferred:
        lines.append("  - None.")
    for d in report.deferred:
        line = f"  - Test {d.test_id} (Condition {d.condition_id}, TPS: {d.priority_score:.2f})"
        if d.reason:
            line += f" [{d.reason}]"
        lines.append(line)
    return "\n".join(lines)


def export_report(report: AllocationReport, filename: str) -> None:
    """Serializes the report for downstream tools."""
    with open(filename, 'w') as f:
        json.dump(report.model_dump(mode='json'), f, indent=2)
    logger.info(f"💾 Exported report to {filename}")


def choose_scenario() -> Optional[Scenario]:
    print("Select Data Input Mode:")
    print("1. Use Pre-set Example Data")
    print("2. Enter Custom User Input")
    print("3. Generate Scenario with Gemini")
    choice = input("Enter choice (1, 2 or 3): ").strip()

    if choice == "1":
        return build_preset_scenario()
    if choice == "2":
        try:
            return ConsoleInput().read_scenario()
        except ValidationError as e:
            logger.error(f"❌ Invalid input: {e}")
            return None
    if choice == "3":
        scenario = generate_scenario()
        if scenario is None:
            logger.warning("⚠️ No generated scenario available. Falling back to the pre-set example.")
            return build_preset_scenario()
        return scenario

    print("Invalid choice. Exiting.")
    return None


def main() -> int:
    scenario = choose_scenario()
    if scenario is None:
        return 1

    logger.info("--- Starting Allocation for Time Slice T ---")
    state = TriageAllocator(scenario).run()
    report = state.build_report()

    print(render_report(report))
    export_report(report, EXPORT_FILENAME)
    return 0


if __name__ == "__main__":
    sys.exit(main())
