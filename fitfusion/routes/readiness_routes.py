# fitfusion/routes/readiness_routes.py

from datetime import date

from flask import Blueprint, current_app

from .. import db
from ..auth import UserContext, auth_required
from ..errors import Conflict, NotFound, envelope
from ..models.readiness_score import ReadinessScore
from ..schemas import ReadinessIn
from .utils import commit, json_body, merged, paginate, parse_date_arg, parse_id, validate

readiness_bp = Blueprint("readiness", __name__)

DUPLICATE_DAY = "A readiness score already exists for this date"


def _get_score(ctx: UserContext, raw_id) -> ReadinessScore:
    score_id = parse_id(raw_id, "readiness score")
    score = ReadinessScore.query.filter_by(id=score_id, user_id=ctx.user_id).first()
    if not score:
        raise NotFound("Readiness score not found")
    return score


def _taken(ctx: UserContext, day: date, exclude_id=None) -> bool:
    q = ReadinessScore.query.filter_by(user_id=ctx.user_id, date=day)
    if exclude_id is not None:
        q = q.filter(ReadinessScore.id != exclude_id)
    return db.session.query(q.exists()).scalar()


@readiness_bp.route("", methods=["POST"])
@auth_required
def create_score(ctx: UserContext):
    data = validate(ReadinessIn, json_body())

    if _taken(ctx, data.date):
        raise Conflict(DUPLICATE_DAY)

    score = ReadinessScore(user_id=ctx.user_id)
    score.apply(data.to_columns())
    db.session.add(score)
    # the unique constraint still catches a concurrent insert for the same day
    commit("create readiness score", conflict_message=DUPLICATE_DAY)

    current_app.logger.info(f"[readiness/create] user_id={ctx.user_id} date={score.date}")
    return envelope(True, "Readiness score created successfully", score.to_dict(), 201)


@readiness_bp.route("", methods=["GET"])
@auth_required
def list_scores(ctx: UserContext):
    q = ReadinessScore.query.filter(ReadinessScore.user_id == ctx.user_id)

    since = parse_date_arg("start_date")
    if since:
        q = q.filter(ReadinessScore.date >= since.date())
    until = parse_date_arg("end_date")
    if until:
        q = q.filter(ReadinessScore.date <= until.date())

    items, meta = paginate(q.order_by(ReadinessScore.date.desc()))
    data = {"scores": [s.to_dict() for s in items], "pagination": meta}
    return envelope(True, "Readiness scores retrieved successfully", data)


@readiness_bp.route("/today", methods=["GET"])
@auth_required
def today_score(ctx: UserContext):
    score = ReadinessScore.query.filter_by(user_id=ctx.user_id, date=date.today()).first()
    if not score:
        raise NotFound("No readiness score recorded for today")
    return envelope(True, "Readiness score retrieved successfully", score.to_dict())


@readiness_bp.route("/<score_id>", methods=["GET"])
@auth_required
def get_score(ctx: UserContext, score_id):
    score = _get_score(ctx, score_id)
    return envelope(True, "Readiness score retrieved successfully", score.to_dict())


@readiness_bp.route("/<score_id>", methods=["PUT"])
@auth_required
def update_score(ctx: UserContext, score_id):
    score = _get_score(ctx, score_id)

    data = validate(ReadinessIn, merged(score, json_body()))
    if _taken(ctx, data.date, exclude_id=score.id):
        raise Conflict(DUPLICATE_DAY)

    score.apply(data.to_columns())
    commit("update readiness score", conflict_message=DUPLICATE_DAY)

    return envelope(True, "Readiness score updated successfully", score.to_dict())


@readiness_bp.route("/<score_id>", methods=["DELETE"])
@auth_required
def delete_score(ctx: UserContext, score_id):
    score = _get_score(ctx, score_id)
    db.session.delete(score)
    commit("delete readiness score")
    return envelope(True, "Readiness score deleted successfully", None)
