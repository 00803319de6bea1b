# fitfusion/models/progress.py
from copy import deepcopy

from .. import db
from .common import BigId, TimestampMixin, iso, utcnow


class Progress(TimestampMixin, db.Model):
    """Point-in-time body snapshot: weight, body fat, measurements, benchmarks."""

    __tablename__ = "progress_entries"
    __table_args__ = (db.Index("ix_progress_user_date", "user_id", "date"),)

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)

    weight_value = db.Column(db.Float)
    weight_unit = db.Column(db.Enum("kg", "lbs", name="progress_weight_unit_enum"), default="kg")
    body_fat_percentage = db.Column(db.Float)

    measurements = db.Column(db.JSON)          # {chest, waist, hips, thighs, arms, unit}
    photos = db.Column(db.JSON, nullable=False, default=list)
    strength_benchmarks = db.Column(db.JSON)   # {bench_press, squat, deadlift, pull_ups, push_ups}
    cardio_metrics = db.Column(db.JSON)        # {resting_heart_rate, vo2_max, running_pace}
    notes = db.Column(db.Text)

    def document(self):
        weight = None
        if self.weight_value is not None:
            weight = {"value": self.weight_value, "unit": self.weight_unit or "kg"}
        return {
            "date": iso(self.date),
            "weight": weight,
            "body_fat_percentage": self.body_fat_percentage,
            "measurements": deepcopy(self.measurements),
            "photos": deepcopy(self.photos or []),
            "strength_benchmarks": deepcopy(self.strength_benchmarks),
            "cardio_metrics": deepcopy(self.cardio_metrics),
            "notes": self.notes,
        }

    def apply(self, doc: dict) -> None:
        weight = doc.get("weight") or {}
        self.date = doc["date"]
        self.weight_value = weight.get("value")
        self.weight_unit = weight.get("unit", "kg")
        self.body_fat_percentage = doc.get("body_fat_percentage")
        self.measurements = doc.get("measurements")
        self.photos = doc.get("photos") or []
        self.strength_benchmarks = doc.get("strength_benchmarks")
        self.cardio_metrics = doc.get("cardio_metrics")
        self.notes = doc.get("notes")

    def to_dict(self):
        data = {"id": self.id, "user_id": self.user_id}
        data.update(self.document())
        data.update({"created_at": iso(self.created_at), "updated_at": iso(self.updated_at)})
        return data
