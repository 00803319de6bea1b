# fitfusion/models/program.py
import math
from copy import deepcopy
from datetime import timedelta

from sqlalchemy import event
from sqlalchemy.orm.attributes import flag_modified

from .. import db
from .common import BigId, TimestampMixin, iso, utcnow
from .user import FITNESS_GOALS
from .workout import WORKOUT_TYPES

PROGRAM_GOALS = FITNESS_GOALS + ("strength", "flexibility")
PROGRAM_DIFFICULTIES = ("beginner", "intermediate", "advanced")
PROGRAM_CREATORS = ("ai-generated", "user-created", "coach", "template")
PROGRAM_STATUSES = ("draft", "active", "completed", "paused", "abandoned")
SLOT_TYPES = WORKOUT_TYPES + ("rest",)
PROGRAM_EQUIPMENT = (
    "dumbbells",
    "barbell",
    "kettlebell",
    "resistance-bands",
    "pull-up-bar",
    "bench",
    "cardio-machine",
    "bodyweight-only",
    "cable-machine",
    "other",
)


class Program(TimestampMixin, db.Model):
    __tablename__ = "programs"
    __table_args__ = (db.Index("ix_programs_user_status", "user_id", "status"),)

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    goal = db.Column(db.Enum(*PROGRAM_GOALS, name="program_goal_enum"), nullable=False)
    difficulty = db.Column(
        db.Enum(*PROGRAM_DIFFICULTIES, name="program_difficulty_enum"),
        nullable=False,
        default="beginner",
    )
    duration_weeks = db.Column(db.Integer, nullable=False)
    days_per_week = db.Column(db.Integer, nullable=False)

    # [{week_number, focus, workouts: [{day, workout_id, title, type, completed, completed_at}]}]
    weeks = db.Column(db.JSON, nullable=False, default=list)

    equipment_required = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=False, default=list)
    creator = db.Column(
        db.Enum(*PROGRAM_CREATORS, name="program_creator_enum"),
        nullable=False,
        default="user-created",
    )
    ai_generation_prompt = db.Column(db.Text)
    status = db.Column(
        db.Enum(*PROGRAM_STATUSES, name="program_status_enum"),
        nullable=False,
        default="draft",
    )
    start_date = db.Column(db.DateTime)
    end_date = db.Column(db.DateTime)
    current_week = db.Column(db.Integer, nullable=False, default=1)

    completed_workouts = db.Column(db.Integer, nullable=False, default=0)
    total_workouts = db.Column(db.Integer, nullable=False, default=0)
    completion_percentage = db.Column(db.Integer, nullable=False, default=0)

    nutrition = db.Column(db.JSON)
    notes = db.Column(db.Text)
    is_public = db.Column(db.Boolean, nullable=False, default=False)

    version = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version}

    # ------------------------------
    # Domain operations
    # ------------------------------
    def calculate_progress(self) -> None:
        completed = total = 0
        for week in self.weeks or []:
            for slot in week.get("workouts") or []:
                total += 1
                if slot.get("completed"):
                    completed += 1

        self.completed_workouts = completed
        self.total_workouts = total
        # half-up rounding
        self.completion_percentage = math.floor(completed * 100 / total + 0.5) if total else 0

    def start(self) -> None:
        now = utcnow()
        self.status = "active"
        self.start_date = now
        self.end_date = now + timedelta(days=self.duration_weeks * 7)
        self.current_week = 1

    def complete_workout(self, week_number: int, workout_index: int) -> bool:
        """Mark one slot completed. Returns False when the slot does not exist."""
        weeks = deepcopy(self.weeks or [])
        week = next((w for w in weeks if w.get("week_number") == week_number), None)
        if week is None:
            return False

        slots = week.get("workouts") or []
        if workout_index < 0 or workout_index >= len(slots):
            return False

        slots[workout_index]["completed"] = True
        slots[workout_index]["completed_at"] = utcnow().isoformat()
        self.set_weeks(weeks)
        self.current_week = max(self.current_week or 1, week_number)

        self.calculate_progress()
        if self.total_workouts and self.completed_workouts == self.total_workouts:
            self.status = "completed"
        return True

    def apply(self, doc: dict) -> None:
        for key in (
            "title",
            "description",
            "goal",
            "difficulty",
            "equipment_required",
            "tags",
            "creator",
            "ai_generation_prompt",
            "status",
            "current_week",
            "nutrition",
            "notes",
            "is_public",
        ):
            setattr(self, key, doc.get(key))
        self.duration_weeks = doc["duration"]["weeks"]
        self.days_per_week = doc["duration"]["days_per_week"]
        self.set_weeks(doc.get("weeks") or [])

    def set_weeks(self, weeks) -> None:
        self.weeks = weeks
        flag_modified(self, "weeks")

    def document(self):
        return {
            "title": self.title,
            "description": self.description,
            "goal": self.goal,
            "difficulty": self.difficulty,
            "duration": {"weeks": self.duration_weeks, "days_per_week": self.days_per_week},
            "weeks": deepcopy(self.weeks or []),
            "equipment_required": list(self.equipment_required or []),
            "tags": list(self.tags or []),
            "creator": self.creator,
            "ai_generation_prompt": self.ai_generation_prompt,
            "status": self.status,
            "current_week": self.current_week,
            "nutrition": deepcopy(self.nutrition),
            "notes": self.notes,
            "is_public": bool(self.is_public),
        }

    def to_dict(self):
        data = {"id": self.id, "user_id": self.user_id}
        data.update(self.document())
        data.update(
            {
                "start_date": iso(self.start_date),
                "end_date": iso(self.end_date),
                "progress": {
                    "completed_workouts": self.completed_workouts or 0,
                    "total_workouts": self.total_workouts or 0,
                    "completion_percentage": self.completion_percentage or 0,
                },
                "version": self.version,
                "created_at": iso(self.created_at),
                "updated_at": iso(self.updated_at),
            }
        )
        return data


@event.listens_for(Program, "before_insert")
@event.listens_for(Program, "before_update")
def _recompute_progress(mapper, connection, target):
    target.calculate_progress()
