# fitfusion/routes/utils.py
import math
from datetime import datetime, time, timedelta
from typing import Any, Dict, Optional, Tuple

import pydantic
from flask import current_app, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from .. import db
from ..errors import ApiError, Conflict, ValidationError, from_pydantic

MAX_PAGE_SIZE = 100


# ------------------------------
# Input helpers
# ------------------------------
def _safe_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_id(raw: Any, label: str) -> int:
    """A well-formed id is a positive decimal integer."""
    text = str(raw or "").strip()
    if not text.isdigit() or int(text) <= 0:
        raise ValidationError(f"Invalid {label} ID")
    return int(text)


def parse_index(raw: Any, label: str = "exercise") -> int:
    text = str(raw or "").strip()
    if not text.isdigit():
        raise ValidationError(f"Invalid {label} index")
    return int(text)


def parse_date_arg(name: str, end_of_day: bool = False) -> Optional[datetime]:
    """?start_date=YYYY-MM-DD (or full ISO datetime). Bare dates for end bounds cover the whole day."""
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"invalid {name}")
    if end_of_day and len(raw) <= 10:
        value = datetime.combine(value.date(), time.max)
    return value


def parse_bool_arg(name: str) -> Optional[bool]:
    raw = request.args.get(name)
    if raw is None:
        return None
    return raw.strip().lower() in ("1", "true", "yes")


def period_start(default_days: int = 30) -> Tuple[int, datetime]:
    days = _safe_int(request.args.get("period"), default_days)
    if days <= 0:
        raise ValidationError("period must be a positive number of days")
    return days, datetime.utcnow() - timedelta(days=days)


def validate(schema, data: Dict[str, Any]):
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        raise from_pydantic(e)


def merged(record, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of a partial update over the stored document."""
    doc = record.document()
    doc.update(patch)
    return doc


# ------------------------------
# Pagination
# ------------------------------
def paginate(query, default_limit: Optional[int] = None):
    """
    page/limit -> offset/limit. Without either (and no default_limit)
    the whole result set is returned as a single page.
    """
    page = _safe_int(request.args.get("page"), 1)
    limit = _safe_int(request.args.get("limit"), default_limit or 0)

    if request.args.get("page") is None and request.args.get("limit") is None and not default_limit:
        items = query.all()
        total = len(items)
        return items, {"current": 1, "pages": 1 if total else 0, "total": total, "limit": total}

    page = max(1, page)
    limit = max(1, min(limit or default_limit or 10, MAX_PAGE_SIZE))

    result = query.paginate(page=page, per_page=limit, error_out=False)
    return result.items, {
        "current": page,
        "pages": math.ceil(result.total / limit) if result.total else 0,
        "total": result.total,
        "limit": limit,
    }


# ------------------------------
# Persistence
# ------------------------------
def commit(action: str, conflict_message: Optional[str] = None) -> None:
    """
    Commit the session. A lost optimistic-lock race becomes 409, so does a
    unique-constraint violation when `conflict_message` is given; any other
    database failure is logged and reported as 500.
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if conflict_message:
            raise Conflict(conflict_message)
        current_app.logger.exception(f"Failed to {action}: {e}")
        raise ApiError(f"Failed to {action}")
    except StaleDataError:
        db.session.rollback()
        raise Conflict(f"Failed to {action}: record was modified concurrently, please retry")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(f"Failed to {action}: {e}")
        raise ApiError(f"Failed to {action}")
