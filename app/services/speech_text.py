"""
Turn plan sections into plain text suitable for speech synthesis.
"""
import re

from app.models.plan import DietPlan, WorkoutPlan

MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")


def format_text_for_tts(text: str) -> str:
    """Flatten newlines into sentence breaks and drop bullet characters."""
    text = text.replace("\n", ". ")
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"[•·]", "", text)
    return text.strip()


def create_workout_tts_text(workout_plan: WorkoutPlan | None) -> str:
    if workout_plan is None:
        return "No workout plan available."

    overview = workout_plan.overview or "A customized workout plan for you."
    parts = [f"Here is your personalized workout plan. {overview}. "]

    for index, day in enumerate(workout_plan.weeklySchedule, start=1):
        parts.append(f"Day {index}, {day.day}. ")
        parts.append(f"Workout duration: {day.duration}. ")
        for number, exercise in enumerate(day.exercises, start=1):
            parts.append(f"Exercise {number}: {exercise.name}. ")
            parts.append(f"{exercise.sets} sets of {exercise.reps} repetitions. ")
            parts.append(f"Rest for {exercise.restTime} between sets. ")
        if day.notes:
            parts.append(f"Important note for today: {day.notes}. ")

    return format_text_for_tts("".join(parts))


def create_diet_tts_text(diet_plan: DietPlan | None) -> str:
    if diet_plan is None:
        return "No diet plan available."

    overview = diet_plan.overview or "A customized nutrition plan for you."
    parts = [f"Here is your personalized diet plan. {overview}. "]

    if diet_plan.dailyCalories:
        parts.append(f"Your daily calorie target is {diet_plan.dailyCalories} calories. ")

    macros = diet_plan.macros
    parts.append(
        f"Macro breakdown: {macros.protein} protein, {macros.carbs} carbohydrates, "
        f"and {macros.fats} fats. "
    )

    for day in diet_plan.dailyMeals:
        parts.append(f"{day.day} meals: ")
        for slot in MEAL_SLOTS:
            meal = getattr(day, slot)
            if meal.name:
                parts.append(f"{slot}: {meal.name}. ")
                if meal.calories:
                    parts.append(f"{meal.calories} calories. ")

    return format_text_for_tts("".join(parts))
