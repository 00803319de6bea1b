"""Request schemas: every create and every merged partial update goes through these."""
import datetime as dt
import re
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models.ai_insight import INSIGHT_TYPES
from .models.meal import MEAL_TYPES
from .models.program import (
    PROGRAM_CREATORS,
    PROGRAM_DIFFICULTIES,
    PROGRAM_EQUIPMENT,
    PROGRAM_GOALS,
    PROGRAM_STATUSES,
    SLOT_TYPES,
)
from .models.readiness_score import INJURY_RISK_LEVELS, RECOMMENDATIONS
from .models.user import (
    ACTIVITY_LEVELS,
    DIETARY_PREFERENCES,
    EQUIPMENT,
    FITNESS_GOALS,
    GENDERS,
)
from .models.workout import EXERCISE_DIFFICULTIES, INTENSITIES, MOODS, WORKOUT_TYPES

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

Score = Annotated[int, Field(ge=0, le=100)]
Percent = Annotated[float, Field(ge=0, le=100)]


class Document(BaseModel):
    # unknown keys (including id / user_id) are dropped
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    def to_columns(self) -> dict:
        """JSON-safe dump, except top-level dates stay as date/datetime objects."""
        data = self.model_dump(mode="json")
        for key, value in self.model_dump().items():
            if isinstance(value, (dt.date, dt.datetime)):
                data[key] = value
        return data


# -----------------------------
# Users
# -----------------------------
class Length(BaseModel):
    value: float = Field(ge=0)
    unit: Literal["cm", "inches"] = "cm"


class Weight(BaseModel):
    value: float = Field(ge=0)
    unit: Literal["kg", "lbs"] = "kg"


class Badge(BaseModel):
    name: str
    earned_at: Optional[dt.datetime] = None
    icon: Optional[str] = None


class UserProfile(Document):
    name: str = Field(min_length=1, max_length=100)
    age: Optional[int] = Field(default=None, ge=0, le=120)
    gender: Optional[Literal[GENDERS]] = None
    height: Optional[Length] = None
    current_weight: Optional[Weight] = None
    target_weight: Optional[Weight] = None
    fitness_goal: Literal[FITNESS_GOALS] = "general-fitness"
    activity_level: Literal[ACTIVITY_LEVELS] = "moderately-active"
    available_equipment: List[Literal[EQUIPMENT]] = []
    dietary_preference: Literal[DIETARY_PREFERENCES] = "balanced"
    profile_picture: Optional[str] = None
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    badges: List[Badge] = []

    @field_validator("available_equipment")
    @classmethod
    def _dedupe_equipment(cls, v):
        return list(dict.fromkeys(v))


class UserRegister(UserProfile):
    email: str = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)

    # passwords are never stripped
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=False)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v):
        v = v.strip().lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Email is invalid")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v):
        return v.strip().lower()


# -----------------------------
# Workouts
# -----------------------------
class ExerciseWeight(BaseModel):
    value: float = Field(ge=0)
    unit: Optional[str] = "kg"


class Exercise(Document):
    name: str = Field(min_length=1)
    sets: Optional[int] = Field(default=None, ge=0)
    reps: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)      # seconds
    weight: Optional[ExerciseWeight] = None
    rest_time: Optional[int] = Field(default=None, ge=0)     # seconds
    notes: Optional[str] = None
    difficulty: Optional[Literal[EXERCISE_DIFFICULTIES]] = None


class WorkoutIn(Document):
    date: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    type: Literal[WORKOUT_TYPES]
    title: str = Field(min_length=1, max_length=200)
    exercises: List[Exercise] = []
    total_duration: int = Field(ge=0)
    calories_burned: int = Field(default=0, ge=0)
    intensity: Optional[Literal[INTENSITIES]] = None
    mood: Optional[Literal[MOODS]] = None
    notes: Optional[str] = None
    ai_generated: bool = False
    is_completed: bool = False
    performance_score: Optional[Percent] = None


class WorkoutComplete(BaseModel):
    performance_score: Optional[Percent] = None
    calories_burned: Optional[int] = Field(default=None, ge=0)


# -----------------------------
# Programs
# -----------------------------
class ProgramSlot(BaseModel):
    day: Optional[int] = Field(default=None, ge=1, le=7)
    workout_id: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = None
    type: Optional[Literal[SLOT_TYPES]] = None
    completed: bool = False
    completed_at: Optional[dt.datetime] = None


class ProgramWeek(BaseModel):
    week_number: int = Field(ge=1)
    focus: Optional[str] = None
    workouts: List[ProgramSlot] = []


class ProgramDuration(BaseModel):
    weeks: int = Field(ge=1, le=52)
    days_per_week: int = Field(ge=1, le=7)


class MacroTargets(BaseModel):
    protein: Optional[float] = Field(default=None, ge=0)
    carbs: Optional[float] = Field(default=None, ge=0)
    fats: Optional[float] = Field(default=None, ge=0)


class ProgramNutrition(BaseModel):
    include_nutrition_plan: bool = False
    daily_calories: Optional[float] = Field(default=None, ge=0)
    macros: Optional[MacroTargets] = None


class ProgramIn(Document):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    goal: Literal[PROGRAM_GOALS]
    difficulty: Literal[PROGRAM_DIFFICULTIES] = "beginner"
    duration: ProgramDuration
    weeks: List[ProgramWeek] = []
    equipment_required: List[Literal[PROGRAM_EQUIPMENT]] = []
    tags: List[str] = []
    creator: Literal[PROGRAM_CREATORS] = "user-created"
    ai_generation_prompt: Optional[str] = None
    status: Literal[PROGRAM_STATUSES] = "draft"
    current_week: int = Field(default=1, ge=1)
    nutrition: Optional[ProgramNutrition] = None
    notes: Optional[str] = None
    is_public: bool = False


class CompleteProgramWorkout(BaseModel):
    week_number: int = Field(ge=1)
    workout_index: int = Field(ge=0)


# -----------------------------
# Meals
# -----------------------------
class FoodItem(BaseModel):
    name: str = Field(min_length=1)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = None


class Macros(BaseModel):
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)


class Micronutrients(BaseModel):
    fiber: Optional[float] = Field(default=None, ge=0)
    sugar: Optional[float] = Field(default=None, ge=0)
    sodium: Optional[float] = Field(default=None, ge=0)
    cholesterol: Optional[float] = Field(default=None, ge=0)


class MealIn(Document):
    date: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    meal_type: Literal[MEAL_TYPES]
    name: str = Field(min_length=1, max_length=200)
    foods: List[FoodItem] = []
    calories: float = Field(ge=0)
    macros: Macros = Field(default_factory=Macros)
    micronutrients: Optional[Micronutrients] = None
    image_url: Optional[str] = None
    recipe_url: Optional[str] = None
    ai_generated: bool = False
    notes: Optional[str] = None


# -----------------------------
# Progress
# -----------------------------
class Measurements(BaseModel):
    chest: Optional[float] = Field(default=None, ge=0)
    waist: Optional[float] = Field(default=None, ge=0)
    hips: Optional[float] = Field(default=None, ge=0)
    thighs: Optional[float] = Field(default=None, ge=0)
    arms: Optional[float] = Field(default=None, ge=0)
    unit: Literal["cm", "inches"] = "cm"


class ProgressPhoto(BaseModel):
    url: str = Field(min_length=1)
    type: Optional[Literal["front", "side", "back"]] = None
    uploaded_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)


class StrengthBenchmarks(BaseModel):
    bench_press: Optional[float] = Field(default=None, ge=0)
    squat: Optional[float] = Field(default=None, ge=0)
    deadlift: Optional[float] = Field(default=None, ge=0)
    pull_ups: Optional[int] = Field(default=None, ge=0)
    push_ups: Optional[int] = Field(default=None, ge=0)


class CardioMetrics(BaseModel):
    resting_heart_rate: Optional[float] = Field(default=None, ge=0)
    vo2_max: Optional[float] = Field(default=None, ge=0)
    running_pace: Optional[float] = Field(default=None, ge=0)   # minutes per km or mile


class ProgressIn(Document):
    date: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    weight: Optional[Weight] = None
    body_fat_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    measurements: Optional[Measurements] = None
    photos: List[ProgressPhoto] = []
    strength_benchmarks: Optional[StrengthBenchmarks] = None
    cardio_metrics: Optional[CardioMetrics] = None
    notes: Optional[str] = None


# -----------------------------
# Readiness
# -----------------------------
class SleepQuality(BaseModel):
    score: Optional[Score] = None
    hours_slept: Optional[float] = Field(default=None, ge=0, le=24)
    notes: Optional[str] = None


class MuscleRecovery(BaseModel):
    score: Optional[Score] = None
    soreness: Optional[Literal["none", "mild", "moderate", "severe"]] = None


class NutritionBalance(BaseModel):
    score: Optional[Score] = None
    calorie_deficit_surplus: Optional[float] = None
    hydration_level: Optional[Literal["poor", "fair", "good", "excellent"]] = None


class StressLevel(BaseModel):
    score: Optional[Score] = None
    rating: Optional[Literal["low", "moderate", "high", "very-high"]] = None


class WorkloadIntensity(BaseModel):
    score: Optional[Score] = None
    last_seven_days_volume: Optional[float] = Field(default=None, ge=0)


class ReadinessFactors(BaseModel):
    sleep_quality: Optional[SleepQuality] = None
    muscle_recovery: Optional[MuscleRecovery] = None
    nutrition_balance: Optional[NutritionBalance] = None
    stress_level: Optional[StressLevel] = None
    recent_workload_intensity: Optional[WorkloadIntensity] = None


class MLPrediction(BaseModel):
    fatigue_level: Optional[Percent] = None
    performance_potential: Optional[Percent] = None
    model_version: Optional[str] = None


class UserFeedback(BaseModel):
    felt_accurate: Optional[bool] = None
    actual_performance: Optional[str] = None


class ReadinessIn(Document):
    date: dt.date = Field(default_factory=dt.date.today)
    overall_score: int = Field(ge=0, le=100)
    factors: Optional[ReadinessFactors] = None
    recommendation: Literal[RECOMMENDATIONS]
    injury_risk_level: Literal[INJURY_RISK_LEVELS] = "low"
    ml_prediction: Optional[MLPrediction] = None
    user_feedback: Optional[UserFeedback] = None


# -----------------------------
# Insights
# -----------------------------
class InsightRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    prompt: Optional[str] = None
    payload: Optional[str] = None
    insight_type: Literal[INSIGHT_TYPES] = "custom-query"
