# fitfusion/routes/gemini_routes.py

from flask import Blueprint, request

from .. import db, insights
from ..auth import UserContext, auth_required
from ..errors import NotFound, envelope
from ..models.ai_insight import AIInsight
from ..quick_replies import get_all_quick_replies, get_quick_replies_by_category
from ..schemas import InsightRequest
from .utils import commit, json_body, paginate, parse_bool_arg, parse_id, validate

gemini_bp = Blueprint("gemini", __name__)


def _get_insight(ctx: UserContext, raw_id) -> AIInsight:
    insight_id = parse_id(raw_id, "insight")
    insight = AIInsight.query.filter_by(id=insight_id, user_id=ctx.user_id).first()
    if not insight:
        raise NotFound("Insight not found")
    return insight


# ------------------------------
# POST /api/gemini/insight
# body: {prompt} or {payload}, optional insight_type
# ------------------------------
@gemini_bp.route("/insight", methods=["POST"])
@auth_required
def create_insight(ctx: UserContext):
    data = validate(InsightRequest, json_body())

    insight = insights.create_insight(
        ctx.user_id,
        prompt=data.prompt,
        payload=data.payload,
        insight_type=data.insight_type,
    )
    return envelope(True, "AI insight generated successfully", insight.to_dict(), 201)


# ------------------------------
# GET /api/gemini/quick-replies?category=
# ------------------------------
@gemini_bp.route("/quick-replies", methods=["GET"])
def list_quick_replies():
    category = request.args.get("category")
    replies = get_quick_replies_by_category(category) if category else get_all_quick_replies()
    return envelope(True, "Quick replies retrieved successfully", replies)


# ------------------------------
# Stored insights
# ------------------------------
@gemini_bp.route("/insights", methods=["GET"])
@auth_required
def list_insights(ctx: UserContext):
    q = AIInsight.query.filter(AIInsight.user_id == ctx.user_id)

    insight_type = request.args.get("insight_type")
    if insight_type:
        q = q.filter(AIInsight.insight_type == insight_type)

    is_read = parse_bool_arg("is_read")
    if is_read is not None:
        q = q.filter(AIInsight.is_read.is_(is_read))

    items, meta = paginate(q.order_by(AIInsight.date.desc(), AIInsight.id.desc()))
    data = {"insights": [i.to_dict() for i in items], "pagination": meta}
    return envelope(True, "Insights retrieved successfully", data)


@gemini_bp.route("/insights/<insight_id>", methods=["GET"])
@auth_required
def get_insight(ctx: UserContext, insight_id):
    insight = _get_insight(ctx, insight_id)
    return envelope(True, "Insight retrieved successfully", insight.to_dict())


@gemini_bp.route("/insights/<insight_id>/read", methods=["PATCH"])
@auth_required
def mark_read(ctx: UserContext, insight_id):
    insight = _get_insight(ctx, insight_id)
    insight.is_read = True
    commit("mark insight as read")
    return envelope(True, "Insight marked as read", insight.to_dict())


@gemini_bp.route("/insights/<insight_id>", methods=["DELETE"])
@auth_required
def delete_insight(ctx: UserContext, insight_id):
    insight = _get_insight(ctx, insight_id)
    db.session.delete(insight)
    commit("delete insight")
    return envelope(True, "Insight deleted successfully", None)
