"""
LLM-powered scenario generator for the Triage Resource Allocator.
STRATEGY: one request returns the whole scenario (budget, resources, conditions, tests).
Output is normalised with the same coercion rules as the console input.
"""

import os
import json
import logging
import re
import google.generativeai as genai
from typing import List, Tuple, Dict, Any, Optional
from pydantic import ValidationError

from models import Condition, DiagnosticTest, Resource, Scenario
from .console_input import (
    MAX_CONDITIONS,
    MAX_RESOURCES,
    MAX_TESTS,
    clamp_count,
    coerce_condition_id,
)

logger = logging.getLogger(__name__)


class DataGenerator:
    def __init__(self, api_key: str | None = None, model_name: str = "gemini-2.5-flash"):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY not found. Please set it in environment.")

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(model_name)
        self.total_cost = 0.0

    def _estimate_cost(self, prompt_tokens: int, response_tokens: int) -> float:
        return (prompt_tokens * 0.075 + response_tokens * 0.30) / 1_000_000

    def _robust_parse_json(self, raw_text: str) -> Dict[str, Any]:
        """
        Handles Markdown fences and stray prose around the JSON object.
        """
        if not raw_text:
            return {}

        # 1. Clean Markdown Code Blocks
        clean_text = re.sub(r"```json\s*|\s*```", "", raw_text).strip()

        try:
            data = json.loads(clean_text)
        except json.JSONDecodeError:
            # Fallback: extract the outermost object
            match = re.search(r'(\{.*\})', clean_text, re.DOTALL)
            if not match:
                return {}
            try:
                data = json.loads(match.group(1))
            except json.JSONDecodeError:
                return {}

        # 2. Normalize Data Shape
        if isinstance(data, dict):
            for key in ('scenario', 'result'):
                if isinstance(data.get(key), dict):
                    return data[key]
            return data
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        return {}

    def _build_scenario(self, raw: Dict[str, Any]) -> Optional[Scenario]:
        """
        Turn parsed JSON into a Scenario.
        Ids are reassigned by position; bad condition references become 0
        and invalid tests are dropped with a warning.
        """
        raw_conditions = raw.get('conditions') or []
        raw_resources = raw.get('resources') or []
        raw_tests = raw.get('tests') or []

        try:
            conditions = [
                Condition(id=k, name=str(item.get('name', '')),
                          criticality=item['criticality'], survivability=item['survivability'])
                for k, item in enumerate(raw_conditions[:clamp_count(len(raw_conditions), MAX_CONDITIONS)])
            ]
            resources = [
                Resource(id=j, name=str(item.get('name', '')),
                         total_capacity=item['total_capacity'], setup_cost=item.get('setup_cost', 0.0))
                for j, item in enumerate(raw_resources[:clamp_count(len(raw_resources), MAX_RESOURCES)])
            ]
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            logger.error(f"❌ Invalid conditions/resources in generated scenario: {e}")
            return None

        if not conditions:
            logger.error("❌ Generated scenario has no conditions")
            return None

        tests: List[DiagnosticTest] = []
        for i, item in enumerate(raw_tests[:clamp_count(len(raw_tests), MAX_TESTS)]):
            try:
                demand_values = item.get('immediate_demand') or []
                if isinstance(demand_values, dict):
                    demand_values = [demand_values.get(str(j), demand_values.get(j, 0.0)) for j in range(len(resources))]
                demand = {j: float(demand_values[j]) if j < len(demand_values) else 0.0 for j in range(len(resources))}

                tests.append(DiagnosticTest(
                    id=len(tests),
                    name=str(item.get('name', '')),
                    condition_id=coerce_condition_id(int(item.get('condition_id', 0)), len(conditions)),
                    explicit_cost=item['explicit_cost'],
                    positivity_probability=item['positivity_probability'],
                    immediate_demand=demand,
                ))
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                logger.warning(f"Skipping invalid test {i} in generated scenario: {e}")
                continue

        try:
            return Scenario(
                budget_max=raw.get('budget_max', 0.0),
                conditions=conditions,
                resources=resources,
                tests=tests,
            )
        except ValidationError as e:
            logger.error(f"❌ Generated scenario failed validation: {e.json()}")
            return None

    def generate_scenario(
        self,
        test_count: int = 20,
        resource_count: int = 3,
        condition_count: int = 6
    ) -> Tuple[Optional[Scenario], float]:
        """
        Generates a full allocation scenario using a STRONG SCHEMA PROMPT.
        """
        prompt = f"""
        Generate a diagnostic-lab allocation scenario for a single time slice.

        OUTPUT FORMAT:
        A single valid JSON Object with keys "budget_max", "resources", "conditions", "tests".

        STRICT SCHEMA RULES:

        1. "budget_max": number between 500 and 20000.

        2. "resources": Array of exactly {resource_count} objects:
           {{ "name": string, "total_capacity": number 10-200, "setup_cost": number 0-2000 }}
           The FIRST resource is the bottleneck lab and should carry a setup cost.

        3. "conditions": Array of exactly {condition_count} objects:
           {{ "name": string, "criticality": number 1-100, "survivability": number 1-100 }}

        4. "tests": Array of exactly {test_count} objects:
           {{
             "name": string,
             "condition_id": integer index into "conditions" (0 to {condition_count - 1}),
             "explicit_cost": number 10-500,
             "positivity_probability": number between 0 and 1,
             "immediate_demand": Array of exactly {resource_count} non-negative numbers (one per resource, same order)
           }}

        5. LOGIC:
           - Mix cheap screening tests with expensive confirmatory ones.
           - Total explicit cost of all tests SHOULD exceed budget_max so that some tests are deferred.
        """

        logger.info(f"🚀 Requesting scenario: {test_count} tests, {resource_count} resources, "
                    f"{condition_count} conditions...")

        try:
            generation_config = genai.GenerationConfig(
                response_mime_type="application/json",
                max_output_tokens=16000,
                temperature=0.7
            )
            response = self.model.generate_content(prompt, generation_config=generation_config)

            cost = 0.0
            usage = getattr(response, 'usage_metadata', None)
            if usage is not None:
                cost = self._estimate_cost(usage.prompt_token_count, usage.candidates_token_count)
            self.total_cost += cost

            raw = self._robust_parse_json(response.text)
        except Exception as e:
            logger.error(f"Scenario generation failed: {e}")
            return None, 0.0

        scenario = self._build_scenario(raw)
        if scenario is not None:
            logger.info(f"✅ Generated scenario with {len(scenario.tests)} tests.")
        return scenario, cost
