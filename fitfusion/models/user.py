# fitfusion/models/user.py
from werkzeug.security import generate_password_hash, check_password_hash

from .. import db
from .common import BigId, TimestampMixin, iso, utcnow

GENDERS = ("male", "female", "other", "prefer-not-to-say")
FITNESS_GOALS = (
    "fat-loss",
    "muscle-gain",
    "endurance",
    "general-fitness",
    "athletic-performance",
)
ACTIVITY_LEVELS = (
    "sedentary",
    "lightly-active",
    "moderately-active",
    "very-active",
    "extremely-active",
)
EQUIPMENT = (
    "dumbbells",
    "barbell",
    "kettlebell",
    "resistance-bands",
    "pull-up-bar",
    "bench",
    "cardio-machine",
    "bodyweight-only",
)
DIETARY_PREFERENCES = (
    "balanced",
    "vegan",
    "vegetarian",
    "keto",
    "paleo",
    "low-carb",
    "high-protein",
)


class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(BigId, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    age = db.Column(db.Integer)
    gender = db.Column(db.Enum(*GENDERS, name="gender_enum"))
    height_value = db.Column(db.Float)
    height_unit = db.Column(db.Enum("cm", "inches", name="height_unit_enum"), default="cm")
    current_weight_value = db.Column(db.Float)
    current_weight_unit = db.Column(db.Enum("kg", "lbs", name="weight_unit_enum"), default="kg")
    target_weight_value = db.Column(db.Float)
    target_weight_unit = db.Column(db.Enum("kg", "lbs", name="weight_unit_enum"), default="kg")

    fitness_goal = db.Column(
        db.Enum(*FITNESS_GOALS, name="fitness_goal_enum"),
        nullable=False,
        default="general-fitness",
    )
    activity_level = db.Column(
        db.Enum(*ACTIVITY_LEVELS, name="activity_level_enum"),
        nullable=False,
        default="moderately-active",
    )
    available_equipment = db.Column(db.JSON, nullable=False, default=list)
    dietary_preference = db.Column(
        db.Enum(*DIETARY_PREFERENCES, name="dietary_preference_enum"),
        nullable=False,
        default="balanced",
    )
    profile_picture = db.Column(db.String(500))

    current_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    badges = db.Column(db.JSON, nullable=False, default=list)
    last_active = db.Column(db.DateTime, default=utcnow)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def profile_fields(self):
        """Editable profile document (shape accepted by UserProfile)."""
        return {
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "height": _measure(self.height_value, self.height_unit or "cm"),
            "current_weight": _measure(self.current_weight_value, self.current_weight_unit or "kg"),
            "target_weight": _measure(self.target_weight_value, self.target_weight_unit or "kg"),
            "fitness_goal": self.fitness_goal,
            "activity_level": self.activity_level,
            "available_equipment": list(self.available_equipment or []),
            "dietary_preference": self.dietary_preference,
            "profile_picture": self.profile_picture,
            "current_streak": self.current_streak or 0,
            "longest_streak": self.longest_streak or 0,
            "badges": list(self.badges or []),
        }

    def apply_profile(self, profile: dict) -> None:
        for key in (
            "name",
            "age",
            "gender",
            "fitness_goal",
            "activity_level",
            "available_equipment",
            "dietary_preference",
            "profile_picture",
            "current_streak",
            "longest_streak",
            "badges",
        ):
            if key in profile:
                setattr(self, key, profile[key])

        for key in ("height", "current_weight", "target_weight"):
            measure = profile.get(key)
            if measure is not None:
                setattr(self, f"{key}_value", measure.get("value"))
                setattr(self, f"{key}_unit", measure.get("unit"))

    def to_dict(self):
        # password_hash is never serialized
        data = {"id": self.id, "email": self.email}
        data.update(self.profile_fields())
        data.update(
            {
                "last_active": iso(self.last_active),
                "created_at": iso(self.created_at),
                "updated_at": iso(self.updated_at),
            }
        )
        return data

    def to_public_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "profile_picture": self.profile_picture,
            "fitness_goal": self.fitness_goal,
            "current_streak": self.current_streak or 0,
            "longest_streak": self.longest_streak or 0,
            "badges": list(self.badges or []),
            "created_at": iso(self.created_at),
        }


def _measure(value, unit):
    if value is None:
        return None
    return {"value": value, "unit": unit}
