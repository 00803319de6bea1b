# fitfusion/routes/workout_routes.py

from flask import Blueprint, current_app, request

from .. import db
from ..auth import UserContext, auth_required
from ..errors import NotFound, envelope
from ..models.workout import Workout
from ..schemas import Exercise, WorkoutComplete, WorkoutIn
from .utils import (
    commit,
    json_body,
    merged,
    paginate,
    parse_bool_arg,
    parse_date_arg,
    parse_id,
    parse_index,
    period_start,
    validate,
)

workouts_bp = Blueprint("workouts", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _get_workout(ctx: UserContext, raw_id) -> Workout:
    workout_id = parse_id(raw_id, "workout")
    workout = Workout.query.filter_by(id=workout_id, user_id=ctx.user_id).first()
    if not workout:
        raise NotFound("Workout not found")
    return workout


def _exercise_at(workout: Workout, raw_index) -> int:
    index = parse_index(raw_index)
    if index >= len(workout.exercises or []):
        raise NotFound("Exercise not found")
    return index


# ------------------------------
# POST /api/workouts
# ------------------------------
@workouts_bp.route("", methods=["POST"])
@auth_required
def create_workout(ctx: UserContext):
    data = validate(WorkoutIn, json_body())

    workout = Workout(user_id=ctx.user_id)
    workout.apply(data.to_columns())
    db.session.add(workout)
    commit("create workout")

    current_app.logger.info(f"[workouts/create] user_id={ctx.user_id} workout_id={workout.id}")
    return envelope(True, "Workout created successfully", workout.to_dict(), 201)


# ------------------------------
# GET /api/workouts?type=&is_completed=&start_date=&end_date=&page=&limit=
# ------------------------------
@workouts_bp.route("", methods=["GET"])
@auth_required
def list_workouts(ctx: UserContext):
    q = Workout.query.filter(Workout.user_id == ctx.user_id)

    workout_type = request.args.get("type")
    if workout_type:
        q = q.filter(Workout.type == workout_type)

    is_completed = parse_bool_arg("is_completed")
    if is_completed is not None:
        q = q.filter(Workout.is_completed.is_(is_completed))

    since = parse_date_arg("date") or parse_date_arg("start_date")
    if since:
        q = q.filter(Workout.date >= since)
    until = parse_date_arg("end_date", end_of_day=True)
    if until:
        q = q.filter(Workout.date <= until)

    items, meta = paginate(q.order_by(Workout.date.desc(), Workout.id.desc()))
    data = {"workouts": [w.to_dict() for w in items], "pagination": meta}
    return envelope(True, "Workouts retrieved successfully", data)


# ------------------------------
# GET /api/workouts/stats?period=30
# ------------------------------
@workouts_bp.route("/stats", methods=["GET"])
@auth_required
def workout_stats(ctx: UserContext):
    days, since = period_start(30)

    row = (
        db.session.query(
            db.func.count(Workout.id),
            db.func.sum(db.case((Workout.is_completed.is_(True), 1), else_=0)),
            db.func.sum(Workout.total_duration),
            db.func.sum(Workout.calories_burned),
            db.func.avg(Workout.performance_score),
        )
        .filter(Workout.user_id == ctx.user_id, Workout.date >= since)
        .one()
    )
    total, completed, duration, calories, avg_perf = row

    stats = {
        "period": days,
        "total_workouts": int(total or 0),
        "completed_workouts": int(completed or 0),
        "total_duration": int(duration or 0),
        "total_calories": int(calories or 0),
        "avg_performance": round(float(avg_perf), 2) if avg_perf is not None else 0,
    }
    return envelope(True, "Workout stats retrieved successfully", stats)


# ------------------------------
# /api/workouts/<id>
# ------------------------------
@workouts_bp.route("/<workout_id>", methods=["GET"])
@auth_required
def get_workout(ctx: UserContext, workout_id):
    workout = _get_workout(ctx, workout_id)
    return envelope(True, "Workout retrieved successfully", workout.to_dict())


@workouts_bp.route("/<workout_id>", methods=["PUT"])
@auth_required
def update_workout(ctx: UserContext, workout_id):
    workout = _get_workout(ctx, workout_id)

    data = validate(WorkoutIn, merged(workout, json_body()))
    workout.apply(data.to_columns())
    commit("update workout")

    return envelope(True, "Workout updated successfully", workout.to_dict())


@workouts_bp.route("/<workout_id>", methods=["DELETE"])
@auth_required
def delete_workout(ctx: UserContext, workout_id):
    workout = _get_workout(ctx, workout_id)
    db.session.delete(workout)
    commit("delete workout")
    return envelope(True, "Workout deleted successfully", None)


@workouts_bp.route("/<workout_id>/complete", methods=["POST"])
@auth_required
def complete_workout(ctx: UserContext, workout_id):
    workout = _get_workout(ctx, workout_id)
    data = validate(WorkoutComplete, json_body())

    workout.is_completed = True
    if data.performance_score is not None:
        workout.performance_score = data.performance_score
    if data.calories_burned is not None:
        workout.calories_burned = data.calories_burned
    commit("complete workout")

    current_app.logger.info(f"[workouts/complete] user_id={ctx.user_id} workout_id={workout.id}")
    return envelope(True, "Workout marked as completed", workout.to_dict())


# ------------------------------
# Embedded exercises
# ------------------------------
@workouts_bp.route("/<workout_id>/exercises", methods=["POST"])
@auth_required
def add_exercise(ctx: UserContext, workout_id):
    workout = _get_workout(ctx, workout_id)
    exercise = validate(Exercise, json_body())

    exercises = list(workout.exercises or [])
    exercises.append(exercise.to_columns())
    workout.set_exercises(exercises)
    commit("add exercise")

    return envelope(True, "Exercise added successfully", workout.to_dict(), 201)


@workouts_bp.route("/<workout_id>/exercises/<index>", methods=["PUT"])
@auth_required
def update_exercise(ctx: UserContext, workout_id, index):
    workout = _get_workout(ctx, workout_id)
    i = _exercise_at(workout, index)

    exercises = [dict(e) for e in workout.exercises]
    doc = exercises[i]
    doc.update(json_body())
    exercises[i] = validate(Exercise, doc).to_columns()
    workout.set_exercises(exercises)
    commit("update exercise")

    return envelope(True, "Exercise updated successfully", workout.to_dict())


@workouts_bp.route("/<workout_id>/exercises/<index>", methods=["DELETE"])
@auth_required
def delete_exercise(ctx: UserContext, workout_id, index):
    workout = _get_workout(ctx, workout_id)
    i = _exercise_at(workout, index)

    exercises = list(workout.exercises)
    del exercises[i]
    workout.set_exercises(exercises)
    commit("remove exercise")

    return envelope(True, "Exercise removed successfully", workout.to_dict())
