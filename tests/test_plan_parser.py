"""
Tests for model output parsing and the template fallback plan.
"""
import json

import pytest
from pydantic import ValidationError

from app.models.profile import UserProfile
from app.services.fallback_plan import FALLBACK_TIPS, create_fallback_plan
from app.services.plan_parser import (
    PlanParseError,
    extract_json_object,
    parse_or_default,
    parse_plan,
    plan_from_model_text,
)


def _plan_json(profile, **overrides) -> str:
    data = create_fallback_plan(profile).model_dump()
    data.update(overrides)
    return json.dumps(data)


class TestExtractJsonObject:
    """Tests for isolating the JSON object in a response."""

    def test_strips_code_fences(self):
        text = '```json\n{"a": 1}\n```'
        assert extract_json_object(text) == '{"a": 1}'

    def test_ignores_surrounding_prose(self):
        text = 'Here is your plan:\n{"a": {"b": 2}}\nGood luck!'
        assert extract_json_object(text) == '{"a": {"b": 2}}'

    @pytest.mark.parametrize("text", ["", "   \n\t"])
    def test_blank_response_raises(self, text):
        with pytest.raises(PlanParseError, match="Empty"):
            extract_json_object(text)

    def test_no_object_raises(self):
        with pytest.raises(PlanParseError, match="No JSON"):
            extract_json_object("I cannot produce a plan } {")


class TestParsePlan:
    """Tests for the strict plan parser."""

    def test_parses_valid_plan(self, gym_profile):
        plan = parse_plan(_plan_json(gym_profile, motivation="Go!"))
        assert plan.motivation == "Go!"
        assert len(plan.workoutPlan.weeklySchedule) == 7

    def test_malformed_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            parse_plan('{"workoutPlan": {"overview": "x",}')

    @pytest.mark.parametrize("missing", ["workoutPlan", "dietPlan"])
    def test_missing_section_raises(self, gym_profile, missing):
        data = json.loads(_plan_json(gym_profile))
        data[missing] = None
        with pytest.raises(PlanParseError, match="missing"):
            parse_plan(json.dumps(data))

    def test_short_week_is_a_schema_violation(self, gym_profile):
        data = json.loads(_plan_json(gym_profile))
        data["dietPlan"]["dailyMeals"] = data["dietPlan"]["dailyMeals"][:5]
        with pytest.raises(ValidationError):
            parse_plan(json.dumps(data))


class TestParseOrDefault:
    """Tests for the parse-or-default combinator."""

    def test_returns_parsed_value(self):
        assert parse_or_default("1", lambda t: int(t), lambda: -1) == 1

    def test_returns_default_on_parse_error(self):
        def parse(_):
            raise PlanParseError("nope")
        assert parse_or_default("x", parse, lambda: "default") == "default"

    def test_unrelated_errors_propagate(self):
        def parse(_):
            raise KeyError("bug")
        with pytest.raises(KeyError):
            parse_or_default("x", parse, lambda: "default")

    @pytest.mark.parametrize("text", [
        "",
        "no braces here",
        "{not json}",
        '{"workoutPlan": null, "dietPlan": {}}',
        '{"tips": []}',
    ])
    def test_plan_from_unusable_text_is_the_fallback(self, sample_profile, text):
        assert plan_from_model_text(text, sample_profile) == create_fallback_plan(sample_profile)


class TestFallbackPlan:
    """Tests for the deterministic template plan."""

    def test_example_scenario(self, sample_profile):
        plan = create_fallback_plan(sample_profile)

        assert plan.dietPlan.dailyCalories == 1800
        monday = plan.dietPlan.dailyMeals[0]
        assert monday.day == "Monday"
        assert monday.breakfast.name == "Oatmeal with Berries"
        assert monday.lunch.name == "Quinoa Salad Bowl"

    def test_seven_days_each(self, sample_profile, gym_profile):
        for profile in (sample_profile, gym_profile):
            plan = create_fallback_plan(profile)
            days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
            assert [d.day for d in plan.workoutPlan.weeklySchedule] == days
            assert [d.day for d in plan.dietPlan.dailyMeals] == days

    def test_is_deterministic(self, gym_profile):
        assert create_fallback_plan(gym_profile) == create_fallback_plan(gym_profile)

    def test_non_loss_goal_gets_more_calories(self, gym_profile):
        assert create_fallback_plan(gym_profile).dietPlan.dailyCalories == 2200

    def test_beginner_home_workout(self, sample_profile):
        monday = create_fallback_plan(sample_profile).workoutPlan.weeklySchedule[0]
        squats = monday.exercises[1]
        assert squats.name == "Bodyweight Squats"
        assert squats.reps == "8-12"

    def test_advanced_gym_workout(self, gym_profile):
        schedule = create_fallback_plan(gym_profile).workoutPlan.weeklySchedule
        assert schedule[0].exercises[1].name == "Treadmill"
        assert schedule[0].exercises[1].reps == "12-15"
        assert schedule[1].exercises[0].instructions == "Use dumbbells or machines for chest and arms"
        assert schedule[6].exercises[0].sets == 0

    def test_non_vegetarian_meals(self, gym_profile):
        monday = create_fallback_plan(gym_profile).dietPlan.dailyMeals[0]
        assert monday.breakfast.name == "Scrambled Eggs with Toast"
        assert monday.snacks.name == "Healthy Snack"

    def test_tips_and_motivation(self, sample_profile):
        plan = create_fallback_plan(sample_profile)
        assert plan.tips == FALLBACK_TIPS
        assert plan.motivation.startswith("Hi Alex! Your weight-loss journey starts now.")

    def test_vegan_uses_the_non_vegetarian_branch(self, sample_profile_data):
        sample_profile_data["dietaryPreference"] = "vegan"
        plan = create_fallback_plan(UserProfile(**sample_profile_data))
        assert plan.dietPlan.dailyMeals[0].breakfast.name == "Scrambled Eggs with Toast"
        assert plan.dietPlan.overview.startswith("A balanced vegan diet plan")
