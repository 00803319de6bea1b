# fitfusion/routes/progress_routes.py

from typing import Any, Dict, Optional

from flask import Blueprint, current_app, request

from .. import db
from ..auth import UserContext, auth_required
from ..errors import NotFound, ValidationError, envelope
from ..models.common import iso
from ..models.progress import Progress
from ..schemas import CardioMetrics, Measurements, ProgressIn, StrengthBenchmarks
from .utils import (
    commit,
    json_body,
    merged,
    paginate,
    parse_date_arg,
    parse_id,
    period_start,
    validate,
)

progress_bp = Blueprint("progress", __name__)

DEFAULT_PAGE_SIZE = 10

# (from, to) -> multiplier
UNIT_FACTORS = {
    ("lbs", "kg"): 1 / 2.20462,
    ("kg", "lbs"): 2.20462,
    ("inches", "cm"): 2.54,
    ("cm", "inches"): 1 / 2.54,
}

# metric prefix -> JSON column holding the nested value
NESTED_METRICS = {
    "measurements": ("measurements", Measurements),
    "strength": ("strength_benchmarks", StrengthBenchmarks),
    "cardio": ("cardio_metrics", CardioMetrics),
}


# ------------------------------
# Helpers
# ------------------------------
def _get_entry(ctx: UserContext, raw_id) -> Progress:
    entry_id = parse_id(raw_id, "progress")
    entry = Progress.query.filter_by(id=entry_id, user_id=ctx.user_id).first()
    if not entry:
        raise NotFound("Progress entry not found")
    return entry


def _in_range(q):
    since = parse_date_arg("start_date")
    if since:
        q = q.filter(Progress.date >= since)
    until = parse_date_arg("end_date", end_of_day=True)
    if until:
        q = q.filter(Progress.date <= until)
    return q


def _metric_reader(metric: str):
    """
    Return a callable giving `(value, unit)` for `metric` on an entry, or raise
    ValidationError. `unit` is None for unitless metrics.
    """
    if metric == "weight":
        return lambda e: (e.weight_value, e.weight_unit or "kg")
    if metric == "body_fat_percentage":
        return lambda e: (e.body_fat_percentage, None)

    prefix, _, field = metric.partition(".")
    if prefix in NESTED_METRICS and field:
        column, schema = NESTED_METRICS[prefix]
        if field in schema.model_fields and field != "unit":
            if "unit" not in schema.model_fields:
                return lambda e: ((getattr(e, column) or {}).get(field), None)
            default_unit = schema.model_fields["unit"].default
            return lambda e: (
                (getattr(e, column) or {}).get(field),
                (getattr(e, column) or {}).get("unit") or default_unit,
            )

    raise ValidationError(f"Unsupported metric '{metric}'")


def _round(v: Optional[float]) -> Optional[float]:
    return round(v, 2) if v is not None else None


def _convert(value: float, unit: Optional[str], target: Optional[str]) -> float:
    if unit == target or unit is None or target is None:
        return value
    return _round(value * UNIT_FACTORS[(unit, target)])


# ------------------------------
# CRUD
# ------------------------------
@progress_bp.route("", methods=["POST"])
@auth_required
def create_entry(ctx: UserContext):
    data = validate(ProgressIn, json_body())

    entry = Progress(user_id=ctx.user_id)
    entry.apply(data.to_columns())
    db.session.add(entry)
    commit("create progress entry")

    current_app.logger.info(f"[progress/create] user_id={ctx.user_id} entry_id={entry.id}")
    return envelope(True, "Progress entry created successfully", entry.to_dict(), 201)


@progress_bp.route("", methods=["GET"])
@auth_required
def list_entries(ctx: UserContext):
    q = _in_range(Progress.query.filter(Progress.user_id == ctx.user_id))

    items, meta = paginate(
        q.order_by(Progress.date.desc(), Progress.id.desc()),
        default_limit=DEFAULT_PAGE_SIZE,
    )
    data = {"entries": [e.to_dict() for e in items], "pagination": meta}
    return envelope(True, "Progress entries retrieved successfully", data)


# ------------------------------
# GET /api/workouts/progress/stats?start_date=&end_date=
# ------------------------------
@progress_bp.route("/stats", methods=["GET"])
@auth_required
def progress_stats(ctx: UserContext):
    entries = (
        _in_range(Progress.query.filter(Progress.user_id == ctx.user_id))
        .order_by(Progress.date.asc(), Progress.id.asc())
        .all()
    )

    weighed = [e for e in entries if e.weight_value is not None]
    body_fat = [e.body_fat_percentage for e in entries if e.body_fat_percentage is not None]

    # weights are reported in the unit of the latest weigh-in
    unit = (weighed[-1].weight_unit or "kg") if weighed else None
    starting = (
        _convert(weighed[0].weight_value, weighed[0].weight_unit or "kg", unit) if weighed else None
    )

    stats: Dict[str, Any] = {
        "total_entries": len(entries),
        "starting_weight": starting,
        "current_weight": weighed[-1].weight_value if weighed else None,
        "weight_change": 0,
        "weight_unit": unit,
        "avg_body_fat": _round(sum(body_fat) / len(body_fat)) if body_fat else None,
        "latest_body_fat": body_fat[-1] if body_fat else None,
        "first_entry_date": iso(entries[0].date) if entries else None,
        "latest_entry_date": iso(entries[-1].date) if entries else None,
    }
    if weighed:
        stats["weight_change"] = _round(weighed[-1].weight_value - starting)

    return envelope(True, "Progress stats retrieved successfully", stats)


# ------------------------------
# GET /api/workouts/progress/trends?period=90&metric=weight
# ------------------------------
@progress_bp.route("/trends", methods=["GET"])
@auth_required
def progress_trends(ctx: UserContext):
    metric = (request.args.get("metric") or "weight").strip()
    read = _metric_reader(metric)
    days, since = period_start(90)

    entries = (
        Progress.query.filter(Progress.user_id == ctx.user_id, Progress.date >= since)
        .order_by(Progress.date.asc(), Progress.id.asc())
        .all()
    )

    readings = []
    for e in entries:
        value, unit = read(e)
        if value is not None:
            readings.append((e.date, value, unit))

    # the series is expressed in the unit of its latest reading
    target = readings[-1][2] if readings else None
    points = [
        {"date": iso(date), "value": _convert(value, unit, target)}
        for date, value, unit in readings
    ]

    change = _round(points[-1]["value"] - points[0]["value"]) if points else 0

    data = {
        "metric": metric,
        "period": days,
        "unit": target,
        "points": points,
        "change": change,
    }
    return envelope(True, "Progress trends retrieved successfully", data)


# ------------------------------
# /api/workouts/progress/<id>
# ------------------------------
@progress_bp.route("/<entry_id>", methods=["GET"])
@auth_required
def get_entry(ctx: UserContext, entry_id):
    entry = _get_entry(ctx, entry_id)
    return envelope(True, "Progress entry retrieved successfully", entry.to_dict())


@progress_bp.route("/<entry_id>", methods=["PUT"])
@auth_required
def update_entry(ctx: UserContext, entry_id):
    entry = _get_entry(ctx, entry_id)

    data = validate(ProgressIn, merged(entry, json_body()))
    entry.apply(data.to_columns())
    commit("update progress entry")

    return envelope(True, "Progress entry updated successfully", entry.to_dict())


@progress_bp.route("/<entry_id>", methods=["DELETE"])
@auth_required
def delete_entry(ctx: UserContext, entry_id):
    entry = _get_entry(ctx, entry_id)
    db.session.delete(entry)
    commit("delete progress entry")
    return envelope(True, "Progress entry deleted successfully", None)
