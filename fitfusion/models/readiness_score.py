# fitfusion/models/readiness_score.py
from copy import deepcopy
from datetime import date

from .. import db
from .common import BigId, TimestampMixin, iso

RECOMMENDATIONS = ("full-intensity", "moderate-intensity", "light-activity", "rest-day")
INJURY_RISK_LEVELS = ("low", "moderate", "high")


class ReadinessScore(TimestampMixin, db.Model):
    __tablename__ = "readiness_scores"
    # one score per user per calendar day
    __table_args__ = (db.UniqueConstraint("user_id", "date", name="uq_readiness_user_date"),)

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today)
    overall_score = db.Column(db.Integer, nullable=False)

    # {sleep_quality, muscle_recovery, nutrition_balance, stress_level, recent_workload_intensity}
    factors = db.Column(db.JSON)
    recommendation = db.Column(
        db.Enum(*RECOMMENDATIONS, name="readiness_recommendation_enum"), nullable=False
    )
    injury_risk_level = db.Column(
        db.Enum(*INJURY_RISK_LEVELS, name="injury_risk_enum"), nullable=False, default="low"
    )
    ml_prediction = db.Column(db.JSON)    # {fatigue_level, performance_potential, model_version}
    user_feedback = db.Column(db.JSON)    # {felt_accurate, actual_performance}

    def document(self):
        return {
            "date": iso(self.date),
            "overall_score": self.overall_score,
            "factors": deepcopy(self.factors),
            "recommendation": self.recommendation,
            "injury_risk_level": self.injury_risk_level,
            "ml_prediction": deepcopy(self.ml_prediction),
            "user_feedback": deepcopy(self.user_feedback),
        }

    def apply(self, doc: dict) -> None:
        for key in (
            "date",
            "overall_score",
            "factors",
            "recommendation",
            "injury_risk_level",
            "ml_prediction",
            "user_feedback",
        ):
            setattr(self, key, doc.get(key))

    def to_dict(self):
        data = {"id": self.id, "user_id": self.user_id}
        data.update(self.document())
        data.update({"created_at": iso(self.created_at), "updated_at": iso(self.updated_at)})
        return data
