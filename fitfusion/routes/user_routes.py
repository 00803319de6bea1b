# fitfusion/routes/user_routes.py
from flask import Blueprint, current_app

from .. import db
from ..auth import UserContext, auth_required, clear_token
from ..errors import NotFound, envelope
from ..models.user import User
from ..schemas import UserProfile
from .utils import commit, json_body, parse_id, validate

users_bp = Blueprint("users", __name__)


def _own_user(ctx: UserContext, raw_id) -> User:
    """Users may only act on their own account; anything else looks like a missing record."""
    user_id = parse_id(raw_id, "user")
    user = db.session.get(User, user_id) if user_id == ctx.user_id else None
    if not user:
        raise NotFound("user not found")
    return user


@users_bp.route("", methods=["GET"])
@auth_required
def list_users(ctx: UserContext):
    users = User.query.order_by(User.created_at.desc()).all()
    return envelope(
        True,
        "successfully found all the users",
        [u.to_public_dict() for u in users],
    )


@users_bp.route("/getuserinfo", methods=["GET"])
@auth_required
def get_user_info(ctx: UserContext):
    user = db.session.get(User, ctx.user_id)
    if not user:
        raise NotFound("user not found")
    return envelope(True, "user info retrieved successfully", user.to_dict())


@users_bp.route("/updatestats/<user_id>", methods=["PUT"])
@auth_required
def update_stats(ctx: UserContext, user_id):
    user = _own_user(ctx, user_id)

    # email and password are not part of UserProfile, so they are ignored here
    doc = user.profile_fields()
    doc.update(json_body())
    profile = validate(UserProfile, doc)
    user.apply_profile(profile.to_columns())
    commit("update user stats")

    return envelope(True, "user stats updated successfully", user.to_dict())


@users_bp.route("/delete/<user_id>", methods=["DELETE"])
@auth_required
def delete_user(ctx: UserContext, user_id):
    user = _own_user(ctx, user_id)

    # no cascade: the user_id foreign keys refuse the delete while owned records remain
    db.session.delete(user)
    commit("delete user", conflict_message="user still owns records, delete them first")
    current_app.logger.info(f"[users/delete] user_id={ctx.user_id}")

    response, status = envelope(True, "user deleted successfully", None)
    clear_token(response)
    return response, status
