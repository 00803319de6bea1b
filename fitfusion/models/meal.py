# fitfusion/models/meal.py
from copy import deepcopy

from .. import db
from .common import BigId, TimestampMixin, iso, utcnow

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class Meal(TimestampMixin, db.Model):
    __tablename__ = "meals"
    __table_args__ = (db.Index("ix_meals_user_date", "user_id", "date"),)

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    meal_type = db.Column(db.Enum(*MEAL_TYPES, name="meal_type_enum"), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    foods = db.Column(db.JSON, nullable=False, default=list)   # [{name, quantity, unit}]
    calories = db.Column(db.Float, nullable=False)

    # macros are flat so the stats query can SUM them
    protein = db.Column(db.Float, nullable=False, default=0)
    carbs = db.Column(db.Float, nullable=False, default=0)
    fats = db.Column(db.Float, nullable=False, default=0)

    micronutrients = db.Column(db.JSON)                        # {fiber, sugar, sodium, cholesterol}
    image_url = db.Column(db.String(500))
    recipe_url = db.Column(db.String(500))
    ai_generated = db.Column(db.Boolean, nullable=False, default=False)
    notes = db.Column(db.Text)

    def document(self):
        return {
            "date": iso(self.date),
            "meal_type": self.meal_type,
            "name": self.name,
            "foods": deepcopy(self.foods or []),
            "calories": self.calories,
            "macros": {
                "protein": self.protein or 0,
                "carbs": self.carbs or 0,
                "fats": self.fats or 0,
            },
            "micronutrients": deepcopy(self.micronutrients),
            "image_url": self.image_url,
            "recipe_url": self.recipe_url,
            "ai_generated": bool(self.ai_generated),
            "notes": self.notes,
        }

    def apply(self, doc: dict) -> None:
        macros = doc.get("macros") or {}
        self.date = doc["date"]
        self.meal_type = doc["meal_type"]
        self.name = doc["name"]
        self.foods = doc.get("foods") or []
        self.calories = doc["calories"]
        self.protein = macros.get("protein", 0)
        self.carbs = macros.get("carbs", 0)
        self.fats = macros.get("fats", 0)
        self.micronutrients = doc.get("micronutrients")
        self.image_url = doc.get("image_url")
        self.recipe_url = doc.get("recipe_url")
        self.ai_generated = doc.get("ai_generated", False)
        self.notes = doc.get("notes")

    def to_dict(self):
        data = {"id": self.id, "user_id": self.user_id}
        data.update(self.document())
        data.update({"created_at": iso(self.created_at), "updated_at": iso(self.updated_at)})
        return data
