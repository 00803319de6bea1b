# fitfusion/routes/food_routes.py

from flask import Blueprint, current_app, request

from .. import db
from ..auth import UserContext, auth_required
from ..errors import NotFound, envelope
from ..models.meal import MEAL_TYPES, Meal
from ..schemas import MealIn
from .utils import commit, json_body, merged, paginate, parse_date_arg, parse_id, validate

food_bp = Blueprint("food", __name__)

DEFAULT_PAGE_SIZE = 10


# ------------------------------
# Helpers
# ------------------------------
def _get_meal(ctx: UserContext, raw_id) -> Meal:
    meal_id = parse_id(raw_id, "meal")
    meal = Meal.query.filter_by(id=meal_id, user_id=ctx.user_id).first()
    if not meal:
        raise NotFound("Meal not found")
    return meal


def _in_range(q):
    since = parse_date_arg("start_date")
    if since:
        q = q.filter(Meal.date >= since)
    until = parse_date_arg("end_date", end_of_day=True)
    if until:
        q = q.filter(Meal.date <= until)
    return q


# ------------------------------
# POST /api/food
# ------------------------------
@food_bp.route("", methods=["POST"])
@auth_required
def create_meal(ctx: UserContext):
    data = validate(MealIn, json_body())

    meal = Meal(user_id=ctx.user_id)
    meal.apply(data.to_columns())
    db.session.add(meal)
    commit("create meal")

    current_app.logger.info(f"[food/create] user_id={ctx.user_id} meal_id={meal.id}")
    return envelope(True, "Meal created successfully", meal.to_dict(), 201)


# ------------------------------
# GET /api/food?meal_type=&start_date=&end_date=&page=&limit=
# ------------------------------
@food_bp.route("", methods=["GET"])
@auth_required
def list_meals(ctx: UserContext):
    q = _in_range(Meal.query.filter(Meal.user_id == ctx.user_id))

    meal_type = request.args.get("meal_type")
    if meal_type:
        q = q.filter(Meal.meal_type == meal_type)

    items, meta = paginate(
        q.order_by(Meal.date.desc(), Meal.id.desc()),
        default_limit=DEFAULT_PAGE_SIZE,
    )
    data = {"meals": [m.to_dict() for m in items], "pagination": meta}
    return envelope(True, "Meals retrieved successfully", data)


# ------------------------------
# GET /api/food/stats?start_date=&end_date=
# ------------------------------
@food_bp.route("/stats", methods=["GET"])
@auth_required
def meal_stats(ctx: UserContext):
    base = _in_range(Meal.query.filter(Meal.user_id == ctx.user_id))

    total, calories, avg_calories, protein, carbs, fats = base.with_entities(
        db.func.count(Meal.id),
        db.func.sum(Meal.calories),
        db.func.avg(Meal.calories),
        db.func.sum(Meal.protein),
        db.func.sum(Meal.carbs),
        db.func.sum(Meal.fats),
    ).one()

    counts = dict(
        base.with_entities(Meal.meal_type, db.func.count(Meal.id))
        .group_by(Meal.meal_type)
        .all()
    )

    stats = {
        "total_meals": int(total or 0),
        "total_calories": float(calories or 0),
        "avg_calories": round(float(avg_calories), 2) if avg_calories is not None else 0,
        "total_protein": float(protein or 0),
        "total_carbs": float(carbs or 0),
        "total_fats": float(fats or 0),
        "meal_type_counts": {t: int(counts.get(t, 0)) for t in MEAL_TYPES},
    }
    return envelope(True, "Meal stats retrieved successfully", stats)


# ------------------------------
# /api/food/<id>
# ------------------------------
@food_bp.route("/<meal_id>", methods=["GET"])
@auth_required
def get_meal(ctx: UserContext, meal_id):
    meal = _get_meal(ctx, meal_id)
    return envelope(True, "Meal retrieved successfully", meal.to_dict())


@food_bp.route("/<meal_id>", methods=["PUT"])
@auth_required
def update_meal(ctx: UserContext, meal_id):
    meal = _get_meal(ctx, meal_id)

    data = validate(MealIn, merged(meal, json_body()))
    meal.apply(data.to_columns())
    commit("update meal")

    return envelope(True, "Meal updated successfully", meal.to_dict())


@food_bp.route("/<meal_id>", methods=["DELETE"])
@auth_required
def delete_meal(ctx: UserContext, meal_id):
    meal = _get_meal(ctx, meal_id)
    db.session.delete(meal)
    commit("delete meal")
    return envelope(True, "Meal deleted successfully", None)
