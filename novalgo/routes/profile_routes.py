from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.schemas.user_schema import ProfileSchema, ProfileUpdateSchema
from novalgo.services.account_service import get_profile, update_profile
from novalgo.utils.response_formatter import success_response

bp = Blueprint("profile", __name__, url_prefix="/api/v1/profile")


@bp.route("", methods=["GET"])
@jwt_required()
def show_profile():
    return success_response({"profile": ProfileSchema().dump(get_profile(get_jwt_identity()))})


@bp.route("", methods=["PATCH"])
@jwt_required()
def edit_profile():
    changes = ProfileUpdateSchema().load(request.get_json(silent=True) or {})
    profile = update_profile(get_jwt_identity(), changes)
    return success_response({"profile": ProfileSchema().dump(profile)}, message="Profile updated")
