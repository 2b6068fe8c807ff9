from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity, create_access_token

from novalgo.extensions import db
from novalgo.models.user import User
from novalgo.schemas.user_schema import (
    ChangePasswordSchema,
    LoginSchema,
    ProfileSchema,
    RegisterSchema,
    UserSchema,
)
from novalgo.services.auth_service import (
    authenticate_user,
    change_password,
    generate_tokens_for_user,
    register_user,
)
from novalgo.utils.response_formatter import success_response, error_response

bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


@bp.route("/register", methods=["POST"])
def register():
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    user = register_user(
        email=data["email"],
        password=data["password"],
        full_name=data["full_name"],
        phone=data["phone"],
        referral_code=data.get("referral_code"),
        experience_level=data.get("experience_level"),
        how_heard_about=data.get("how_heard_about"),
        terms_accepted=data["terms_accepted"],
    )
    access, refresh = generate_tokens_for_user(user)
    return success_response({
        "user": UserSchema().dump(user),
        "profile": ProfileSchema().dump(user.profile),
        "access_token": access,
        "refresh_token": refresh,
    }, status=201)


@bp.route("/login", methods=["POST"])
def login():
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user = authenticate_user(data["email"], data["password"])
    access, refresh = generate_tokens_for_user(user)
    return success_response({
        "user": UserSchema().dump(user),
        "access_token": access,
        "refresh_token": refresh,
    })


@bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    return success_response({"access_token": create_access_token(identity=get_jwt_identity())})


@bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = db.session.get(User, get_jwt_identity())
    if not user:
        return error_response("NOT_FOUND", "User not found", status=404)

    return success_response({
        "user": UserSchema().dump(user),
        "profile": ProfileSchema().dump(user.profile) if user.profile else None,
    })


@bp.route("/password", methods=["PATCH"])
@jwt_required()
def update_password():
    data = ChangePasswordSchema().load(request.get_json(silent=True) or {})
    change_password(get_jwt_identity(), data["current_password"], data["new_password"])
    return success_response(message="Password updated")
