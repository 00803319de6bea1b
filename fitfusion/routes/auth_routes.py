# fitfusion/routes/auth_routes.py

from datetime import datetime

from flask import Blueprint, current_app

from .. import db
from ..auth import clear_token, issue_token
from ..errors import Unauthorized, ValidationError, envelope
from ..models.user import User
from ..schemas import LoginRequest, UserRegister
from .utils import commit, json_body, validate

auth_bp = Blueprint("auth", __name__)


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/register", methods=["POST"])
def register():
    data = validate(UserRegister, json_body())

    if User.query.filter_by(email=data.email).first():
        raise ValidationError("email already in use")

    user = User(email=data.email)
    user.apply_profile(data.to_columns())
    user.set_password(data.password)

    db.session.add(user)
    commit("register user", conflict_message="email already in use")

    current_app.logger.info(f"[auth/register] user_id={user.id}")
    response, status = envelope(True, "user created successfully!", user.to_dict(), 201)
    issue_token(response, user.id)
    return response, status


@auth_bp.route("/login", methods=["POST"])
def login():
    data = validate(LoginRequest, json_body())

    user = User.query.filter_by(email=data.email).first()

    if not user:
        current_app.logger.info(f"[auth/login] user NOT found for '{data.email}'")
        raise Unauthorized("email or password incorrect")

    if not user.check_password(data.password):
        current_app.logger.info(f"[auth/login] bad password for user_id={user.id}")
        raise Unauthorized("email or password incorrect")

    user.last_active = datetime.utcnow()
    commit("update last active")

    response, status = envelope(True, "user authenticated successfully", user.to_dict(), 200)
    issue_token(response, user.id)
    return response, status


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response, status = envelope(True, "user logged out successfully", None, 200)
    clear_token(response)
    return response, status
