# fitfusion/auth.py
from dataclasses import dataclass
from functools import wraps

from flask import current_app
from flask_jwt_extended import (
    create_access_token,
    get_csrf_token,
    get_jwt_identity,
    set_access_cookies,
    unset_jwt_cookies,
    verify_jwt_in_request,
)

from .errors import Unauthorized


@dataclass(frozen=True)
class UserContext:
    """Identity of the authenticated caller, handed to every protected view."""

    user_id: int


def auth_required(view):
    """
    Verify the access token (cookie or bearer header) and call
    `view(ctx, *args, **kwargs)` with a UserContext.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        identity = get_jwt_identity()
        try:
            user_id = int(identity)
        except (TypeError, ValueError):
            raise Unauthorized("Invalid auth token")
        return view(UserContext(user_id=user_id), *args, **kwargs)

    return wrapper


def issue_token(response, user_id: int) -> str:
    """
    Sign a 7-day token for `user_id` and attach it as the access cookie.

    The cookie lives exactly as long as the token. With CSRF protection on,
    the double-submit value is also sent in the X-CSRF-TOKEN response header
    so a cross-site frontend, which cannot read our cookies, can echo it back.
    """
    token = create_access_token(identity=str(user_id))
    max_age = int(current_app.config["JWT_ACCESS_TOKEN_EXPIRES"].total_seconds())
    set_access_cookies(response, token, max_age=max_age)

    if current_app.config.get("JWT_COOKIE_CSRF_PROTECT"):
        response.headers[current_app.config["JWT_ACCESS_CSRF_HEADER_NAME"]] = get_csrf_token(token)
    return token


def clear_token(response) -> None:
    unset_jwt_cookies(response)
