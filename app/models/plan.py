"""
Pydantic models for the generated 7-day fitness plan.
"""
from pydantic import BaseModel, Field

DAYS_PER_WEEK = 7


# --- Workout Models ---

class Exercise(BaseModel):
    """Single exercise in a day's workout."""
    name: str
    sets: int
    reps: str
    restTime: str = ""
    instructions: str = ""


class WeeklyScheduleEntry(BaseModel):
    """One day of the weekly workout schedule."""
    day: str
    exercises: list[Exercise]
    duration: str
    notes: str = ""


class WorkoutPlan(BaseModel):
    overview: str
    weeklySchedule: list[WeeklyScheduleEntry] = Field(
        ..., min_length=DAYS_PER_WEEK, max_length=DAYS_PER_WEEK
    )


# --- Diet Models ---

class Meal(BaseModel):
    """Single meal slot."""
    name: str
    ingredients: list[str] = []
    calories: int


class Macros(BaseModel):
    protein: str
    carbs: str
    fats: str


class DailyMeals(BaseModel):
    """The four meal slots of one day."""
    day: str
    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: Meal


class DietPlan(BaseModel):
    overview: str
    dailyCalories: int
    macros: Macros
    dailyMeals: list[DailyMeals] = Field(
        ..., min_length=DAYS_PER_WEEK, max_length=DAYS_PER_WEEK
    )


# --- Plan ---

class FitnessPlan(BaseModel):
    """Complete plan returned by /api/generate-plan."""
    workoutPlan: WorkoutPlan
    dietPlan: DietPlan
    tips: list[str] = []
    motivation: str = ""
