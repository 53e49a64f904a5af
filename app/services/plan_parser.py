"""
Parsing of untrusted model output into a FitnessPlan.

Any schema violation substitutes a default computed from input that has
already been validated, so callers always get a usable plan.
"""
import json
import re
from typing import Callable, TypeVar

from pydantic import ValidationError

from app.core.logger import log_fallback
from app.models.plan import FitnessPlan
from app.models.profile import UserProfile
from app.services.fallback_plan import create_fallback_plan

T = TypeVar("T")

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


class PlanParseError(ValueError):
    """Model output could not be turned into a plan."""


def extract_json_object(text: str) -> str:
    """
    Isolate the JSON object embedded in a model response.

    Strips Markdown code fences and returns the span from the first '{'
    to the last '}'.

    Raises:
        PlanParseError: If the text is blank or holds no '{...}' span
    """
    if not text or not text.strip():
        raise PlanParseError("Empty response from model")

    cleaned = _CODE_FENCE.sub("", text.strip())

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise PlanParseError("No JSON object found in model response")

    return cleaned[start:end + 1]


def parse_plan(text: str) -> FitnessPlan:
    """
    Parse a model response into a FitnessPlan.

    Raises:
        PlanParseError: If no JSON object is present or a plan section is missing
        json.JSONDecodeError: If the JSON is malformed
        ValidationError: If the plan does not match the schema
    """
    data = json.loads(extract_json_object(text))

    if not isinstance(data, dict) or not data.get("workoutPlan") or not data.get("dietPlan"):
        raise PlanParseError("Plan is missing workoutPlan or dietPlan")

    return FitnessPlan.model_validate(data)


def parse_or_default(text: str, parse: Callable[[str], T], default: Callable[[], T]) -> T:
    """Return parse(text), or default() when the text does not parse."""
    try:
        return parse(text)
    except (PlanParseError, json.JSONDecodeError, ValidationError) as e:
        log_fallback("model output", f"{type(e).__name__}: {e}")
        return default()


def plan_from_model_text(text: str, profile: UserProfile) -> FitnessPlan:
    return parse_or_default(text, parse_plan, lambda: create_fallback_plan(profile))
