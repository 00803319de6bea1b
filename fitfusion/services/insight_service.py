# fitfusion/services/insight_service.py
"""
Gemini-backed insight generation.

One request (free-text prompt or quick-reply payload) becomes one stored
AIInsight. The model is asked for strict JSON matching INSIGHT_RESPONSE_SCHEMA;
anything that does not parse into that shape is rejected and nothing is saved.
"""
import json
from typing import Any, Dict, List, Optional

from flask import current_app
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..errors import (
    AIConfigurationError,
    AIContentBlocked,
    AIQuotaExceeded,
    AIServiceError,
    ApiError,
    InvalidAIResponse,
    NotFound,
    ValidationError,
)
from ..models.ai_insight import AIInsight, INSIGHT_TYPES, PRIORITIES
from ..models.meal import Meal
from ..models.readiness_score import ReadinessScore
from ..models.user import User
from ..models.workout import Workout
from ..quick_replies import get_quick_reply_by_payload

DEFAULT_PRIORITY = "medium"

INSIGHT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "summary": {"type": "STRING"},
        "recommendations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "category": {"type": "STRING"},
                    "text": {"type": "STRING"},
                    "priority": {"type": "STRING", "enum": list(PRIORITIES)},
                },
                "required": ["text"],
            },
        },
        "quick_replies": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "text": {"type": "STRING"},
                    "payload": {"type": "STRING"},
                    "category": {"type": "STRING"},
                    "description": {"type": "STRING"},
                },
                "required": ["text", "payload"],
            },
        },
    },
    "required": ["title", "summary"],
}

OUTPUT_RULES = """\
Respond with a single JSON object and nothing else, with these keys:
- "title": short headline for this insight
- "summary": a few sentences answering the request
- "recommendations": list of {"category", "text", "priority"}; priority is one of low, medium, high
- "quick_replies": 3 to 4 follow-up options you generate fresh for this answer, each
  {"text", "payload", "category", "description"}; they must be specific to the
  answer above, and "payload" is UPPER_SNAKE_CASE (e.g. "SHOW_LEG_DAY_ALTERNATIVES")."""


class InsightService:
    """Flask extension wrapping the genai client."""

    def __init__(self, app=None):
        self._client = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.extensions["insights"] = self

    # ------------------------------
    # Client
    # ------------------------------
    @property
    def client(self):
        if self._client is None:
            api_key = current_app.config.get("GEMINI_API_KEY")
            if not api_key:
                raise AIConfigurationError("GEMINI_API_KEY is not set")
            self._client = genai.Client(api_key=api_key)
        return self._client

    @client.setter
    def client(self, value):
        self._client = value

    # ------------------------------
    # Prompt
    # ------------------------------
    @staticmethod
    def build_prompt(request_text: str, user: User) -> str:
        # name / email / password never leave the server
        profile = {
            "age": user.age,
            "gender": user.gender,
            "height": _measure(user.height_value, user.height_unit),
            "current_weight": _measure(user.current_weight_value, user.current_weight_unit),
            "target_weight": _measure(user.target_weight_value, user.target_weight_unit),
            "fitness_goal": user.fitness_goal,
            "activity_level": user.activity_level,
            "available_equipment": list(user.available_equipment or []),
            "dietary_preference": user.dietary_preference,
            "current_streak": user.current_streak or 0,
        }
        profile_lines = "\n".join(
            f"- {key}: {value}" for key, value in profile.items() if value not in (None, [])
        )

        return (
            "You are FitFusion, a personal fitness and nutrition coach.\n\n"
            f"User request:\n{request_text}\n\n"
            f"{OUTPUT_RULES}\n\n"
            f"User fitness profile:\n{profile_lines or '- (not provided)'}\n"
        )

    # ------------------------------
    # Model call
    # ------------------------------
    def generate(self, prompt: str) -> Dict[str, Any]:
        model = current_app.config.get("GEMINI_MODEL", "gemini-2.5-flash")
        config = genai_types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=INSIGHT_RESPONSE_SCHEMA,
        )

        try:
            response = self.client.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise _map_api_error(e)
        except AIServiceError:
            raise
        except Exception as e:
            current_app.logger.exception(f"[insights] Gemini call failed: {e}")
            raise AIServiceError()

        _raise_if_blocked(response)

        text = getattr(response, "text", None) or ""
        try:
            parsed = json.loads(text)
        except (TypeError, ValueError):
            current_app.logger.warning(f"[insights] non-JSON reply: {text[:200]!r}")
            raise InvalidAIResponse()

        if not isinstance(parsed, dict):
            raise InvalidAIResponse("AI response was not a JSON object")
        return parsed

    # ------------------------------
    # Insight creation
    # ------------------------------
    def create_insight(
        self,
        user_id,
        prompt: Optional[str] = None,
        payload: Optional[str] = None,
        insight_type: str = "custom-query",
    ) -> AIInsight:
        user_id = _check_user_id(user_id)

        prompt = (prompt or "").strip() or None
        payload = (payload or "").strip() or None
        if prompt and payload:
            raise ValidationError("Provide either a prompt or a quick-reply payload, not both")
        if not prompt and not payload:
            raise ValidationError("Prompt or quick-reply payload is required")

        max_len = current_app.config.get("INSIGHT_PROMPT_MAX_LENGTH", 2000)
        if prompt and len(prompt) > max_len:
            raise ValidationError(f"Prompt must be at most {max_len} characters")

        if insight_type not in INSIGHT_TYPES:
            raise ValidationError(f"Invalid insight type '{insight_type}'")

        if payload:
            reply = get_quick_reply_by_payload(payload)
            if reply is None:
                raise ValidationError(f"Unknown quick-reply payload '{payload}'")
            request_text = f"{reply['text']}. {reply['description']}."
        else:
            request_text = prompt

        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("user not found")

        raw = self.generate(self.build_prompt(request_text, user))
        content = normalize_reply(raw)

        insight = AIInsight(
            user_id=user.id,
            insight_type=insight_type,
            title=content["title"],
            summary=content["summary"],
            recommendations=content["recommendations"],
            quick_replies=content["quick_replies"],
            details={"source": "quick-reply", "payload": payload} if payload else {"source": "prompt"},
            data_snapshot=data_snapshot(user.id),
            source_prompt=request_text,
            ai_model=current_app.config.get("GEMINI_MODEL", "gemini-2.5-flash"),
        )
        db.session.add(insight)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[insights] failed to save insight: {e}")
            raise ApiError("Failed to save AI insight")

        current_app.logger.info(
            f"[insights] created insight_id={insight.id} user_id={user.id} "
            f"type={insight_type} source={'quick-reply' if payload else 'prompt'} model={insight.ai_model}"
        )
        return insight


# ------------------------------
# Helpers
# ------------------------------
def _measure(value, unit):
    return f"{value:g} {unit}" if value is not None else None


def _check_user_id(raw) -> int:
    text = str(raw if raw is not None else "").strip()
    if not text.isdigit() or int(text) <= 0:
        raise ValidationError("Invalid user ID")
    return int(text)


def _map_api_error(e) -> AIServiceError:
    code = getattr(e, "code", None)
    status = str(getattr(e, "status", "") or "")
    message = str(getattr(e, "message", "") or e)

    if code in (401, 403) or "API_KEY_INVALID" in message or "API key not valid" in message:
        current_app.logger.error(f"[insights] Gemini rejected credentials: {code} {status}")
        return AIConfigurationError()
    if code == 429 or status == "RESOURCE_EXHAUSTED":
        current_app.logger.warning("[insights] Gemini quota exhausted")
        return AIQuotaExceeded()

    current_app.logger.error(f"[insights] Gemini API error {code} {status}: {message}")
    return AIServiceError()


def _raise_if_blocked(response) -> None:
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and getattr(feedback, "block_reason", None):
        current_app.logger.warning(f"[insights] prompt blocked: {feedback.block_reason}")
        raise AIContentBlocked()

    for candidate in getattr(response, "candidates", None) or []:
        reason = getattr(candidate, "finish_reason", None)
        if getattr(reason, "name", reason) == "SAFETY":
            current_app.logger.warning("[insights] reply stopped by safety filter")
            raise AIContentBlocked()


def normalize_reply(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce the model's JSON into the stored insight shape."""
    title = raw.get("title")
    summary = raw.get("summary")
    if not isinstance(title, str) or not title.strip():
        raise InvalidAIResponse("AI response is missing a title")
    if not isinstance(summary, str) or not summary.strip():
        raise InvalidAIResponse("AI response is missing a summary")

    recommendations: List[Dict[str, str]] = []
    for item in raw.get("recommendations") or []:
        if not isinstance(item, dict) or not item.get("text"):
            continue
        priority = str(item.get("priority") or "").lower()
        recommendations.append(
            {
                "category": str(item.get("category") or "general"),
                "text": str(item["text"]),
                "priority": priority if priority in PRIORITIES else DEFAULT_PRIORITY,
            }
        )

    quick_replies: List[Dict[str, str]] = []
    for item in raw.get("quick_replies") or raw.get("quickReplies") or []:
        if not isinstance(item, dict) or not item.get("payload"):
            continue
        reply = {
            "text": str(item.get("text") or item["payload"]),
            "payload": str(item["payload"]),
        }
        for key in ("category", "description"):
            if item.get(key):
                reply[key] = str(item[key])
        quick_replies.append(reply)

    return {
        "title": title.strip(),
        "summary": summary.strip(),
        "recommendations": recommendations,
        "quick_replies": quick_replies,
    }


def data_snapshot(user_id: int) -> Dict[str, Any]:
    """Running totals stored alongside each insight."""
    workouts, burned = (
        db.session.query(db.func.count(Workout.id), db.func.sum(Workout.calories_burned))
        .filter(Workout.user_id == user_id)
        .one()
    )
    consumed = (
        db.session.query(db.func.sum(Meal.calories)).filter(Meal.user_id == user_id).scalar()
    )
    readiness = (
        db.session.query(db.func.avg(ReadinessScore.overall_score))
        .filter(ReadinessScore.user_id == user_id)
        .scalar()
    )
    return {
        "total_workouts": int(workouts or 0),
        "total_calories_burned": int(burned or 0),
        "total_calories_consumed": float(consumed or 0),
        "avg_readiness_score": round(float(readiness), 2) if readiness is not None else None,
    }
