# fitfusion/models/workout.py
from copy import deepcopy

from sqlalchemy.orm.attributes import flag_modified

from .. import db
from .common import BigId, TimestampMixin, iso, utcnow

WORKOUT_TYPES = ("strength", "cardio", "hiit", "flexibility", "sports", "mixed")
INTENSITIES = ("low", "moderate", "high", "max")
MOODS = ("energized", "good", "neutral", "tired", "exhausted")
EXERCISE_DIFFICULTIES = ("easy", "medium", "hard")


class Workout(TimestampMixin, db.Model):
    __tablename__ = "workouts"
    __table_args__ = (db.Index("ix_workouts_user_date", "user_id", "date"),)

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    type = db.Column(db.Enum(*WORKOUT_TYPES, name="workout_type_enum"), nullable=False)
    title = db.Column(db.String(200), nullable=False)

    # ordered list of embedded exercise documents
    exercises = db.Column(db.JSON, nullable=False, default=list)

    total_duration = db.Column(db.Integer, nullable=False)       # minutes
    calories_burned = db.Column(db.Integer, nullable=False, default=0)
    intensity = db.Column(db.Enum(*INTENSITIES, name="workout_intensity_enum"))
    mood = db.Column(db.Enum(*MOODS, name="workout_mood_enum"))
    notes = db.Column(db.Text)
    ai_generated = db.Column(db.Boolean, nullable=False, default=False)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    performance_score = db.Column(db.Float)

    version = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version}

    def document(self):
        """Client-editable fields, shaped like a WorkoutIn payload."""
        return {
            "date": iso(self.date),
            "type": self.type,
            "title": self.title,
            "exercises": deepcopy(self.exercises or []),
            "total_duration": self.total_duration,
            "calories_burned": self.calories_burned or 0,
            "intensity": self.intensity,
            "mood": self.mood,
            "notes": self.notes,
            "ai_generated": bool(self.ai_generated),
            "is_completed": bool(self.is_completed),
            "performance_score": self.performance_score,
        }

    def apply(self, doc: dict) -> None:
        for key in (
            "date",
            "type",
            "title",
            "total_duration",
            "calories_burned",
            "intensity",
            "mood",
            "notes",
            "ai_generated",
            "is_completed",
            "performance_score",
        ):
            setattr(self, key, doc.get(key))
        self.set_exercises(doc.get("exercises") or [])

    def set_exercises(self, exercises) -> None:
        self.exercises = exercises
        flag_modified(self, "exercises")

    def to_dict(self):
        data = {"id": self.id, "user_id": self.user_id}
        data.update(self.document())
        data.update(
            {
                "version": self.version,
                "created_at": iso(self.created_at),
                "updated_at": iso(self.updated_at),
            }
        )
        return data
