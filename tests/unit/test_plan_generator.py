"""
Unit tests for plan generation.

Covers the BMI and protein arithmetic, the defaults applied to a plan
request, the layout of the rendered plan and diet suggestion, and the
best-effort save in ``PlanGenerator.generate``.
"""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InternalError, ValidationError
from app.models.user import ActivityLevelType, GenderType, GoalType
from app.schemas.plan import DietSuggestionRequest, PlanRequest
from app.services.plan_archive import PlanArchive
from app.services.plan_generator import (
    WEEKLY_SCHEDULE,
    PlanGenerator,
    calculate_bmi,
    format_number,
    format_timestamp,
    humanize,
    protein_target,
    round_half_up,
)

GENERATED_AT = datetime(2024, 3, 15, 8, 30, 0, tzinfo=timezone.utc)


def make_request(**overrides) -> PlanRequest:
    data = {"goal": "muscle_gain", "age": 30, "weight": 70, "height": 175}
    data.update(overrides)
    return PlanRequest(**data)


class TestArithmetic:
    """BMI, protein and number formatting."""

    def test_bmi_rounds_to_one_decimal(self):
        assert calculate_bmi(70, 175) == 22.9
        assert calculate_bmi(80, 180) == 24.7

    def test_bmi_rejects_zero_height(self):
        with pytest.raises(ValidationError):
            calculate_bmi(70, 0)

    @pytest.mark.parametrize(
        "goal, expected",
        [
            (GoalType.muscle_gain, 176),
            (GoalType.weight_loss, 144),
            (GoalType.maintenance, 144),
        ],
    )
    def test_protein_target_for_80kg(self, goal, expected):
        assert protein_target(goal, 80) == expected

    def test_round_half_up_is_not_bankers_rounding(self):
        assert round_half_up(0.5) == Decimal("1")
        assert round_half_up(2.5) == Decimal("3")
        assert round_half_up(2.25, 1) == Decimal("2.3")

    def test_format_number(self):
        assert format_number(70.0) == "70"
        assert format_number(70) == "70"
        assert format_number(70.5) == "70.5"

    def test_humanize_replaces_only_first_underscore(self):
        assert humanize("weight_loss") == "WEIGHT LOSS"
        assert humanize("12_weeks") == "12 WEEKS"
        assert humanize("upper_body_strength") == "UPPER BODY_STRENGTH"

    def test_format_timestamp(self):
        assert format_timestamp(GENERATED_AT) == "2024-03-15 08:30:00 UTC"


class TestResolveParameters:
    """Required fields and defaults."""

    def test_defaults_are_filled_in(self):
        # Act
        parameters = PlanGenerator.resolve_parameters(make_request())

        # Assert
        assert parameters.activity_level == ActivityLevelType.moderate
        assert parameters.focus_area == "full_body"
        assert parameters.duration == "4_weeks"
        assert parameters.gender == GenderType.male
        assert parameters.dietary_restrictions is None

    def test_explicit_values_are_kept(self):
        parameters = PlanGenerator.resolve_parameters(
            make_request(activity_level="light", focus_area="core", duration="8_weeks", gender="female")
        )

        assert parameters.activity_level == ActivityLevelType.light
        assert parameters.focus_area == "core"
        assert parameters.duration == "8_weeks"
        assert parameters.gender == GenderType.female

    @pytest.mark.parametrize("missing", ["goal", "age", "weight", "height"])
    def test_missing_required_field(self, missing):
        data = {"goal": "weight_loss", "age": 30, "weight": 70, "height": 175}
        del data[missing]

        with pytest.raises(ValidationError) as exc_info:
            PlanGenerator.resolve_parameters(PlanRequest(**data))

        assert exc_info.value.message == "Missing required fields: goal, age, weight, height"

    def test_zero_counts_as_missing(self):
        with pytest.raises(ValidationError):
            PlanGenerator.resolve_parameters(make_request(age=0))


class TestBuildPlan:
    """The rendered plan document."""

    def test_profile_block(self):
        # Arrange
        request = make_request(activity_level="active")

        # Act
        generated = PlanGenerator.build(request, generated_at=GENERATED_AT)

        # Assert
        text = generated.plan
        assert "4 WEEKS PERSONALIZED FITNESS PLAN" in text
        assert "• Age: 30 years" in text
        assert "• Gender: Male" in text
        assert "• Weight: 70 kg" in text
        assert "• Height: 175 cm" in text
        assert "• BMI: 22.9 kg/m²" in text
        assert "• Goal: MUSCLE GAIN" in text
        assert "• Activity Level: ACTIVE" in text
        assert "• Focus Area: FULL BODY" in text
        assert text.endswith("✨ Generated by FITSPHERE AI on 2024-03-15 08:30:00 UTC")

    def test_sections_in_order(self):
        text = PlanGenerator.build(make_request(), generated_at=GENERATED_AT).plan

        markers = [
            "PERSONALIZED FITNESS PLAN",
            "👤 PROFILE SUMMARY:",
            "WEEKLY WORKOUT SCHEDULE",
            "📅 MONDAY - Upper Body Strength",
            "📅 SUNDAY - Complete Rest",
            "NUTRITION GUIDELINES",
            "✨ Generated by FITSPHERE AI",
        ]
        positions = [text.index(marker) for marker in markers]
        assert positions == sorted(positions)

    def test_every_day_is_listed(self):
        text = PlanGenerator.build(make_request(), generated_at=GENERATED_AT).plan

        for heading, items in WEEKLY_SCHEDULE:
            assert f"📅 {heading}" in text
            for item in items:
                assert f"• {item}" in text

    @pytest.mark.parametrize(
        "goal, heading, protein",
        [
            ("weight_loss", "🔥 WEIGHT LOSS NUTRITION:", "• Protein: 126g per day"),
            ("muscle_gain", "💪 MUSCLE GAIN NUTRITION:", "• Protein: 154g per day"),
            ("maintenance", "⚖️ MAINTENANCE NUTRITION:", "• Protein: 126g per day"),
        ],
    )
    def test_nutrition_branch(self, goal, heading, protein):
        text = PlanGenerator.build(make_request(goal=goal), generated_at=GENERATED_AT).plan

        assert heading in text
        assert protein in text

    def test_dietary_restrictions_line_only_when_given(self):
        without = PlanGenerator.build(make_request(), generated_at=GENERATED_AT).plan
        with_restrictions = PlanGenerator.build(
            make_request(dietary_restrictions="vegetarian"), generated_at=GENERATED_AT
        ).plan

        assert "Dietary Restrictions" not in without
        assert "• Dietary Restrictions: vegetarian" in with_restrictions

    def test_only_the_footer_depends_on_time(self):
        later = datetime(2025, 1, 1, tzinfo=timezone.utc)

        first = PlanGenerator.build(make_request(), generated_at=GENERATED_AT).plan.splitlines()
        second = PlanGenerator.build(make_request(), generated_at=later).plan.splitlines()

        assert first[:-1] == second[:-1]
        assert first[-1] != second[-1]

    def test_schedule_is_the_same_for_every_goal(self):
        loss = PlanGenerator.build(make_request(goal="weight_loss"), generated_at=GENERATED_AT).plan
        gain = PlanGenerator.build(make_request(goal="muscle_gain"), generated_at=GENERATED_AT).plan

        def schedule(text):
            return text[text.index("WEEKLY WORKOUT SCHEDULE"):text.index("NUTRITION GUIDELINES")]

        assert schedule(loss) == schedule(gain)

    def test_user_info_snapshot(self):
        generated = PlanGenerator.build(make_request(gender="female"), generated_at=GENERATED_AT)

        assert generated.user_info.bmi == 22.9
        assert generated.user_info.gender == GenderType.female
        assert generated.user_info.activity_level == ActivityLevelType.moderate
        assert generated.created_at == GENERATED_AT
        assert generated.id is None


class TestDietSuggestion:

    def test_defaults(self):
        suggestion = PlanGenerator.diet_suggestion(DietSuggestionRequest()).suggestion

        assert suggestion.startswith("🍽️ MEAL SUGGESTION")
        assert "Dietary Preference: Balanced" in suggestion
        assert "Target Calories: ~500 kcal" in suggestion
        assert "Total: ~500 calories" in suggestion
        assert suggestion.endswith("Generated by FITSPHERE AI")

    def test_inputs_are_echoed(self):
        suggestion = PlanGenerator.diet_suggestion(
            DietSuggestionRequest(meal_type="breakfast", dietary_preferences="Vegan", calories=650)
        ).suggestion

        assert suggestion.startswith("🍽️ BREAKFAST SUGGESTION")
        assert "Dietary Preference: Vegan" in suggestion
        assert "Target Calories: ~650 kcal" in suggestion

    def test_meal_body_is_fixed(self):
        first = PlanGenerator.diet_suggestion(DietSuggestionRequest(calories=300)).suggestion
        second = PlanGenerator.diet_suggestion(DietSuggestionRequest(calories=900)).suggestion

        assert "• Protein: Grilled chicken breast (200g)" in first
        assert "Protein: 45g | Carbs: 55g | Fats: 12g" in second

    def test_free_text_values_are_echoed(self):
        suggestion = PlanGenerator.diet_suggestion(
            DietSuggestionRequest(meal_type=3, dietary_preferences=["vegan", "nut-free"], calories="600-700")
        ).suggestion

        assert suggestion.startswith("🍽️ 3 SUGGESTION")
        assert "Dietary Preference: ['vegan', 'nut-free']" in suggestion
        assert "Target Calories: ~600-700 kcal" in suggestion
        assert "Total: ~600-700 calories" in suggestion


class TestGenerate:
    """Generation with the archive mocked out."""

    @pytest.mark.asyncio
    async def test_trial_never_touches_the_database(self):
        db = AsyncMock()

        with patch.object(PlanArchive, "create_plan", new_callable=AsyncMock) as create_plan:
            generated = await PlanGenerator.generate(db, make_request())

        create_plan.assert_not_called()
        assert generated.id is None

    @pytest.mark.asyncio
    async def test_saved_plan_gets_an_id(self):
        db = AsyncMock()
        saved = SimpleNamespace(id="plan-1")

        with patch.object(PlanArchive, "create_plan", new=AsyncMock(return_value=saved)):
            generated = await PlanGenerator.generate(db, make_request(), user_id="user-1")

        assert generated.id == "plan-1"

    @pytest.mark.asyncio
    async def test_save_failure_still_returns_the_plan(self):
        db = AsyncMock()
        failing = AsyncMock(side_effect=SQLAlchemyError("database is down"))

        with patch.object(PlanArchive, "create_plan", new=failing):
            generated = await PlanGenerator.generate(db, make_request(), user_id="user-1")

        assert generated.id is None
        assert "PERSONALIZED FITNESS PLAN" in generated.plan
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_database_save_failure_still_returns_the_plan(self):
        # Arrange: the save fails outside SQLAlchemy and so does the rollback
        db = AsyncMock()
        db.rollback.side_effect = RuntimeError("connection already closed")
        failing = AsyncMock(side_effect=TypeError("Object of type Decimal is not JSON serializable"))

        # Act
        with patch.object(PlanArchive, "create_plan", new=failing):
            generated = await PlanGenerator.generate(db, make_request(), user_id="user-1")

        # Assert
        assert generated.id is None
        assert "PERSONALIZED FITNESS PLAN" in generated.plan
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_fields_propagate(self):
        with pytest.raises(ValidationError):
            await PlanGenerator.generate(AsyncMock(), PlanRequest(goal="weight_loss"))

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_internal_errors(self):
        with patch.object(PlanGenerator, "build", side_effect=RuntimeError("template exploded")):
            with pytest.raises(InternalError) as exc_info:
                await PlanGenerator.generate(AsyncMock(), make_request())

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "template exploded"
