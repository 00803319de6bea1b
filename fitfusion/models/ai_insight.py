# fitfusion/models/ai_insight.py
from .. import db
from .common import BigId, TimestampMixin, iso, utcnow

INSIGHT_TYPES = (
    "daily-summary",
    "weekly-summary",
    "monthly-summary",
    "performance-analysis",
    "nutrition-feedback",
    "recommendation",
    "custom-query",
)
PRIORITIES = ("low", "medium", "high")


class AIInsight(TimestampMixin, db.Model):
    __tablename__ = "ai_insights"
    __table_args__ = (db.Index("ix_ai_insights_user_date", "user_id", "date"),)

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    insight_type = db.Column(db.Enum(*INSIGHT_TYPES, name="insight_type_enum"), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    summary = db.Column(db.Text, nullable=False)

    recommendations = db.Column(db.JSON, nullable=False, default=list)  # [{category, text, priority}]
    quick_replies = db.Column(db.JSON, nullable=False, default=list)    # [{text, payload, category, description}]
    details = db.Column(db.JSON)
    data_snapshot = db.Column(db.JSON)

    source_prompt = db.Column(db.Text)
    ai_model = db.Column(db.String(100), nullable=False, default="gemini-2.5-flash")
    is_read = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": iso(self.date),
            "insight_type": self.insight_type,
            "title": self.title,
            "summary": self.summary,
            "recommendations": self.recommendations or [],
            "quick_replies": self.quick_replies or [],
            "details": self.details,
            "data_snapshot": self.data_snapshot,
            "source_prompt": self.source_prompt,
            "ai_model": self.ai_model,
            "is_read": bool(self.is_read),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
