# fitfusion/errors.py
from typing import Any, Optional

from flask import jsonify


def envelope(success: bool, message: str, data: Any = None, status: int = 200):
    """Every JSON response goes out as {success, message, data}."""
    return jsonify({"success": success, "message": message, "data": data}), status


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.data = data


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Missing or invalid auth token"


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Resource was modified by another request"


# -----------------------------
# Insight service failures (all 500)
# -----------------------------
class AIServiceError(ApiError):
    default_message = "Failed to generate AI insight"


class InvalidAIResponse(AIServiceError):
    default_message = "AI returned a response that could not be parsed"


class AIConfigurationError(AIServiceError):
    default_message = "AI service is not configured correctly"


class AIQuotaExceeded(AIServiceError):
    default_message = "AI service quota exceeded, please try again later"


class AIContentBlocked(AIServiceError):
    default_message = "The request was blocked by the AI safety filter"


def from_pydantic(exc) -> ValidationError:
    """Translate a pydantic.ValidationError into ours (first error as message)."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "Invalid request")
    message = f"{loc}: {msg}" if loc else msg
    details = [
        {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg")}
        for e in errors
    ]
    return ValidationError(message, data=details)
