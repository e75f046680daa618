"""
Interactive data entry for the Triage Resource Allocator.

Prompts for the budget, resources, conditions and tests, clamps the counts
to the supported maxima and coerces out-of-range condition references to
condition 0 before anything reaches the allocator.
"""

import logging
import math
from typing import Callable, List, Optional

from models import Condition, DiagnosticTest, Resource, Scenario

logger = logging.getLogger(__name__)

MAX_TESTS = 100
MAX_RESOURCES = 10
MAX_CONDITIONS = 50

Prompt = Callable[[str], str]


def clamp_count(value: int, maximum: int) -> int:
    """Negative counts become 0, counts above the cap become the cap."""
    if value > maximum:
        logger.warning(f"Count {value} exceeds maximum {maximum}; clamping")
        return maximum
    return max(value, 0)


def coerce_condition_id(condition_id: int, num_conditions: int) -> int:
    """Out-of-range condition references fall back to condition 0."""
    if 0 <= condition_id < num_conditions:
        return condition_id
    logger.warning(f"Condition id {condition_id} out of range (0-{num_conditions - 1}); using 0")
    return 0


class ConsoleInput:
    """
    Reads a Scenario from prompts. `prompt` defaults to `input` and can be
    swapped for a scripted reader.
    """

    def __init__(self, prompt: Prompt = input):
        self.prompt = prompt

    def _ask_float(self, label: str, minimum: float = 0.0, maximum: Optional[float] = None) -> float:
        """Re-prompts until the answer is a finite number within [minimum, maximum]."""
        while True:
            raw = self.prompt(label).strip()
            try:
                value = float(raw)
            except ValueError:
                print(f"  '{raw}' is not a number, try again.")
                continue

            if not math.isfinite(value) or value < minimum or (maximum is not None and value > maximum):
                upper = "" if maximum is None else f" and {maximum:g}"
                print(f"  {raw} is out of range (must be between {minimum:g}{upper}), try again.")
                continue
            return value

    def _ask_int(self, label: str) -> int:
        while True:
            raw = self.prompt(label).strip()
            try:
                return int(raw)
            except ValueError:
                print(f"  '{raw}' is not a whole number, try again.")

    def read_scenario(self) -> Scenario:
        print("\n*** Data Input for Allocation Algorithm ***")

        budget = self._ask_float("Enter Total Budget B_Max ($): ")
        num_resources = clamp_count(
            self._ask_int(f"Enter number of Resource Categories (Max {MAX_RESOURCES}): "), MAX_RESOURCES)
        num_conditions = clamp_count(
            self._ask_int(f"Enter number of Health Conditions (Max {MAX_CONDITIONS}): "), MAX_CONDITIONS)
        num_tests = clamp_count(
            self._ask_int(f"Enter number of Diagnostic Tests (Max {MAX_TESTS}): "), MAX_TESTS)

        # Tests need a condition to fall back to
        if num_tests > 0 and num_conditions == 0:
            logger.warning("Tests were requested without conditions; entering one condition")
            num_conditions = 1

        conditions = self._read_conditions(num_conditions)
        resources = self._read_resources(num_resources)
        tests = self._read_tests(num_tests, num_conditions, num_resources)

        return Scenario(budget_max=budget, conditions=conditions, resources=resources, tests=tests)

    def _read_conditions(self, count: int) -> List[Condition]:
        print("\n--- Condition and Diagnostic Data ---")
        conditions = []
        for k in range(count):
            print(f"Condition {k}:")
            criticality = self._ask_float("  Criticality W_Crit (Score): ")
            survivability = self._ask_float("  Survivability W_Surv (Score): ")
            conditions.append(Condition(id=k, criticality=criticality, survivability=survivability))
        return conditions

    def _read_resources(self, count: int) -> List[Resource]:
        print("\n--- Resource and Capacity Data ---")
        resources = []
        for j in range(count):
            print(f"Resource {j}:")
            capacity = self._ask_float("  Total Capacity Cap_Total (Units/Time): ")
            setup_cost = self._ask_float("  Shared Resource Setup Cost R_j ($): ")
            resources.append(Resource(id=j, total_capacity=capacity, setup_cost=setup_cost))
        return resources

    def _read_tests(self, count: int, num_conditions: int, num_resources: int) -> List[DiagnosticTest]:
        print("\n--- Test and Cost Data ---")
        tests = []
        for i in range(count):
            print(f"Test {i}:")
            raw_condition = self._ask_int(f"  Screens for Condition ID (0 to {num_conditions - 1}): ")
            explicit_cost = self._ask_float("  Explicit Test Cost C_i ($): ")
            p_pos = self._ask_float("  Prevalence P_Pos (0-1): ", maximum=1.0)
            demand = {
                j: self._ask_float(f"  Immediate Demand D_i,{j}^Immediate (Units/Time): ")
                for j in range(num_resources)
            }
            tests.append(DiagnosticTest(
                id=i,
                condition_id=coerce_condition_id(raw_condition, num_conditions),
                explicit_cost=explicit_cost,
                positivity_probability=p_pos,
                immediate_demand=demand,
            ))
        return tests
