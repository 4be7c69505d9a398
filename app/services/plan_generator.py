"""Plan generation.

Plans are text templates filled from the user's biometrics and preferences.
The weekly schedule is the same for everyone; the profile block and the
nutrition targets change with the inputs.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import FitSphereError, InternalError, ValidationError
from app.models.user import ActivityLevelType, GenderType, GoalType
from app.schemas.plan import (
    DietSuggestion,
    DietSuggestionRequest,
    GeneratedPlan,
    PlanParameters,
    PlanRequest,
    PlanUserInfo,
)
from app.services.plan_archive import PlanArchive
from app.utils.logger import plan_logger

Number = Union[int, float]

DEFAULT_FOCUS_AREA = "full_body"
DEFAULT_DURATION = "4_weeks"

DEFAULT_MEAL_TYPE = "meal"
DEFAULT_DIETARY_PREFERENCE = "Balanced"
DEFAULT_MEAL_CALORIES = 500

BOX_TOP = "╔═══════════════════════════════════════════════════════════════╗"
BOX_BOTTOM = "╚═══════════════════════════════════════════════════════════════╝"
RULE = "━" * 61

# (heading, items) per day, Monday first
WEEKLY_SCHEDULE = [
    ("MONDAY - Upper Body Strength", [
        "Warm-up: 5-10 minutes light cardio",
        "Push-ups: 3 sets × 12 reps",
        "Dumbbell Bench Press: 3 sets × 10 reps",
        "Shoulder Press: 3 sets × 12 reps",
        "Tricep Dips: 3 sets × 10 reps",
        "Cool-down: 5-10 minutes stretching",
    ]),
    ("TUESDAY - Lower Body Power", [
        "Warm-up: 5-10 minutes light cardio",
        "Squats: 4 sets × 12 reps",
        "Lunges: 3 sets × 10 reps per leg",
        "Leg Press: 3 sets × 12 reps",
        "Calf Raises: 3 sets × 15 reps",
        "Cool-down: 5-10 minutes stretching",
    ]),
    ("WEDNESDAY - Active Recovery", [
        "30-minute walk, yoga, or stretching",
    ]),
    ("THURSDAY - Back & Biceps", [
        "Warm-up: 5-10 minutes light cardio",
        "Pull-ups or Lat Pulldowns: 3 sets × 10 reps",
        "Bent-over Rows: 3 sets × 12 reps",
        "Bicep Curls: 3 sets × 12 reps",
        "Hammer Curls: 3 sets × 10 reps",
        "Cool-down: 5-10 minutes stretching",
    ]),
    ("FRIDAY - Core & Cardio", [
        "Planks: 3 sets × 45-60 seconds",
        "Russian Twists: 3 sets × 20 reps",
        "Leg Raises: 3 sets × 15 reps",
        "Mountain Climbers: 3 sets × 20 reps",
        "20-30 minutes cardio",
    ]),
    ("SATURDAY - Active Day", [
        "Sports, swimming, or outdoor activities",
    ]),
    ("SUNDAY - Complete Rest", [
        "Focus on recovery and meal prep",
    ]),
]

PROTEIN_PER_KG = {
    GoalType.muscle_gain: 2.2,
}
DEFAULT_PROTEIN_PER_KG = 1.8


def round_half_up(value: Number, digits: int = 0) -> Decimal:
    """Round like a calculator does (0.5 goes up), not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def format_number(value: Number) -> str:
    """Render 70.0 as ``70`` and 70.5 as ``70.5``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def humanize(token: str) -> str:
    """``weight_loss`` -> ``WEIGHT LOSS``. Only the first underscore is replaced."""
    return token.replace("_", " ", 1).upper()


def calculate_bmi(weight_kg: Number, height_cm: Number) -> float:
    """BMI rounded to one decimal."""
    height_m = float(height_cm) / 100
    if height_m <= 0:
        raise ValidationError("Height must be greater than zero")
    return float(round_half_up(float(weight_kg) / (height_m * height_m), 1))


def protein_target(goal: GoalType, weight_kg: Number) -> int:
    """Daily protein in grams: 2.2 g/kg for muscle gain, 1.8 g/kg otherwise."""
    per_kg = PROTEIN_PER_KG.get(goal, DEFAULT_PROTEIN_PER_KG)
    return int(round_half_up(float(weight_kg) * per_kg))


def _nutrition_lines(goal: GoalType, weight_kg: Number) -> List[str]:
    protein = protein_target(goal, weight_kg)
    if goal == GoalType.weight_loss:
        return [
            "🔥 WEIGHT LOSS NUTRITION:",
            "• Daily Calories: Deficit of 300-500 calories",
            f"• Protein: {protein}g per day",
            "• Water: Minimum 2.5-3 liters per day",
        ]
    if goal == GoalType.muscle_gain:
        return [
            "💪 MUSCLE GAIN NUTRITION:",
            "• Daily Calories: Surplus of 300-500 calories",
            f"• Protein: {protein}g per day",
            "• Water: Minimum 3-4 liters per day",
        ]
    return [
        "⚖️ MAINTENANCE NUTRITION:",
        "• Daily Calories: Maintenance level",
        f"• Protein: {protein}g per day",
        "• Water: Minimum 2-3 liters per day",
    ]


def _boxed(title: str) -> List[str]:
    return [BOX_TOP, f"║{title.center(63)}", BOX_BOTTOM]


def format_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def build_plan_text(parameters: PlanParameters, bmi: float, generated_at: datetime) -> str:
    """Render the full plan document.

    Sections, in order: banner, profile summary, weekly schedule, nutrition,
    generation footer. Only the footer depends on ``generated_at``.
    """
    gender = parameters.gender.value
    lines = _boxed(f"{humanize(parameters.duration)} PERSONALIZED FITNESS PLAN")
    lines += [
        "",
        "👤 PROFILE SUMMARY:",
        RULE,
        f"• Age: {parameters.age} years",
        f"• Gender: {gender[:1].upper() + gender[1:]}",
        f"• Weight: {format_number(parameters.weight)} kg",
        f"• Height: {format_number(parameters.height)} cm",
        f"• BMI: {bmi:.1f} kg/m²",
        f"• Goal: {humanize(parameters.goal.value)}",
        f"• Activity Level: {parameters.activity_level.value.upper()}",
        f"• Focus Area: {humanize(parameters.focus_area)}",
    ]
    if parameters.dietary_restrictions:
        lines.append(f"• Dietary Restrictions: {parameters.dietary_restrictions}")

    lines.append("")
    lines += _boxed("WEEKLY WORKOUT SCHEDULE")
    for heading, items in WEEKLY_SCHEDULE:
        lines += ["", f"📅 {heading}", RULE]
        lines += [f"• {item}" for item in items]

    lines.append("")
    lines += _boxed("NUTRITION GUIDELINES")
    lines.append("")
    lines += _nutrition_lines(parameters.goal, parameters.weight)
    lines += ["", f"✨ Generated by FITSPHERE AI on {format_timestamp(generated_at)}"]
    return "\n".join(lines)


def _as_text(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def build_diet_suggestion(request: DietSuggestionRequest) -> str:
    meal_type = _as_text(request.meal_type or DEFAULT_MEAL_TYPE)
    preference = _as_text(request.dietary_preferences or DEFAULT_DIETARY_PREFERENCE)
    calories = _as_text(request.calories or DEFAULT_MEAL_CALORIES)

    return "\n".join([
        f"🍽️ {meal_type.upper()} SUGGESTION",
        RULE,
        "",
        f"Dietary Preference: {preference}",
        f"Target Calories: ~{calories} kcal",
        "",
        "RECOMMENDED MEAL:",
        "• Protein: Grilled chicken breast (200g)",
        "• Carbs: Brown rice (150g cooked)",
        "• Vegetables: Mixed steamed vegetables",
        "• Healthy Fats: Olive oil drizzle",
        "",
        "MACROS:",
        "Protein: 45g | Carbs: 55g | Fats: 12g",
        f"Total: ~{calories} calories",
        "",
        "Generated by FITSPHERE AI",
    ])


class PlanGenerator:
    """Builds plans and diet suggestions; saves plans for signed-in users."""

    @staticmethod
    def resolve_parameters(request: PlanRequest) -> PlanParameters:
        """Check the required inputs and fill in defaults."""
        if not request.goal or not request.age or not request.weight or not request.height:
            raise ValidationError("Missing required fields: goal, age, weight, height")

        return PlanParameters(
            goal=request.goal,
            activity_level=request.activity_level or ActivityLevelType.moderate,
            focus_area=request.focus_area or DEFAULT_FOCUS_AREA,
            duration=request.duration or DEFAULT_DURATION,
            age=request.age,
            weight=request.weight,
            height=request.height,
            gender=request.gender or GenderType.male,
            dietary_restrictions=request.dietary_restrictions,
        )

    @staticmethod
    def build(request: PlanRequest, generated_at: Optional[datetime] = None) -> GeneratedPlan:
        """Generate a plan without touching the database."""
        parameters = PlanGenerator.resolve_parameters(request)
        generated_at = generated_at or datetime.now(timezone.utc)
        bmi = calculate_bmi(parameters.weight, parameters.height)

        return GeneratedPlan(
            plan=build_plan_text(parameters, bmi, generated_at),
            user_info=PlanUserInfo(
                age=parameters.age,
                weight=parameters.weight,
                height=parameters.height,
                gender=parameters.gender,
                goal=parameters.goal,
                activity_level=parameters.activity_level,
                bmi=bmi,
            ),
            parameters=parameters,
            created_at=generated_at,
        )

    @staticmethod
    async def generate(
        db: AsyncSession,
        request: PlanRequest,
        user_id: Optional[str] = None,
    ) -> GeneratedPlan:
        """Generate a plan and, for a signed-in user, try to save it.

        Saving is best effort: if it fails for any reason the plan is still
        returned, just without an ``id``.
        """
        plan_logger.section_start("Plan Generation", "GENERATE")
        plan_logger.info("Generating plan", "GENERATE", user_id=user_id or "trial")

        try:
            generated = PlanGenerator.build(request)
        except FitSphereError:
            plan_logger.section_end("Plan Generation", "GENERATE", success=False)
            raise
        except Exception as e:
            plan_logger.error(f"Plan generation failed: {e}", "GENERATE")
            plan_logger.section_end("Plan Generation", "GENERATE", success=False)
            raise InternalError(str(e) or "Failed to generate fitness plan", original_error=e)

        if user_id:
            try:
                saved = await PlanArchive.create_plan(db, user_id, generated)
                generated.id = saved.id
                plan_logger.success("Plan saved", "ARCHIVE", plan_id=saved.id)
            except Exception as e:
                plan_logger.warning(f"Failed to save plan, returning it unsaved: {e}", "ARCHIVE",
                                    user_id=user_id)
                try:
                    await db.rollback()
                except Exception as rollback_error:
                    plan_logger.warning(f"Rollback after failed save also failed: {rollback_error}",
                                        "ARCHIVE", user_id=user_id)

        plan_logger.section_end("Plan Generation", "GENERATE")
        return generated

    @staticmethod
    def diet_suggestion(request: DietSuggestionRequest) -> DietSuggestion:
        plan_logger.info("Generating diet suggestion", "DIET",
                         meal_type=_as_text(request.meal_type or DEFAULT_MEAL_TYPE))
        return DietSuggestion(suggestion=build_diet_suggestion(request))
