"""
Pydantic models for the user profile submitted by the plan form.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FitnessGoal(str, Enum):
    WEIGHT_LOSS = "weight-loss"
    MUSCLE_GAIN = "muscle-gain"
    GENERAL_FITNESS = "general-fitness"
    ENDURANCE = "endurance"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"


class FitnessLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class WorkoutLocation(str, Enum):
    HOME_NO_EQUIPMENT = "home-no-equipment"
    HOME_BASIC_EQUIPMENT = "home-basic-equipment"
    GYM = "gym"
    OUTDOOR = "outdoor"


class DietaryPreference(str, Enum):
    NON_VEGETARIAN = "non-vegetarian"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    KETO = "keto"
    PALEO = "paleo"
    MEDITERRANEAN = "mediterranean"


class StressLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


REQUIRED_FIELDS = (
    "name",
    "age",
    "height",
    "weight",
    "fitnessGoal",
    "fitnessLevel",
    "workoutLocation",
    "dietaryPreference",
)


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)):
        return value == 0
    return False


class UserProfile(BaseModel):
    """
    Profile submitted by the user. Immutable once created.

    Required fields are typed as optional so that a blank submission can be
    answered with a 400 listing what is missing, rather than a schema error.
    """

    model_config = ConfigDict(
        frozen=True,
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "name": "Alex",
                "age": 30,
                "gender": "male",
                "height": 175,
                "weight": 70,
                "fitnessGoal": "weight-loss",
                "fitnessLevel": "beginner",
                "workoutLocation": "home-no-equipment",
                "dietaryPreference": "vegetarian",
            }
        },
    )

    name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[str] = Field(None)
    height: Optional[float] = Field(None, ge=0, le=300, description="Height in cm")
    weight: Optional[float] = Field(None, ge=0, le=500, description="Weight in kg")
    fitnessGoal: Optional[FitnessGoal] = None
    fitnessLevel: Optional[FitnessLevel] = None
    workoutLocation: Optional[WorkoutLocation] = None
    dietaryPreference: Optional[DietaryPreference] = None
    medicalHistory: Optional[str] = Field(None, max_length=2000)
    stressLevel: Optional[StressLevel] = None
    sleepHours: Optional[float] = Field(None, ge=0, le=24)
    waterIntake: Optional[float] = Field(None, ge=0, le=20, description="Litres per day")

    @field_validator(
        "age", "height", "weight", "fitnessGoal", "fitnessLevel", "workoutLocation",
        "dietaryPreference", "stressLevel", "sleepHours", "waterIntake",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value):
        # Form selects and number inputs submit "" when left empty
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def missing_fields(self) -> list[str]:
        """Required fields that are absent, empty or zero."""
        return [f for f in REQUIRED_FIELDS if _is_blank(getattr(self, f))]
