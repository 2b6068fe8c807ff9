from functools import wraps

from flask import g
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.extensions import bcrypt, db
from novalgo.models.user import User
from novalgo.utils.response_formatter import error_response


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")


def check_password(password, hashed_password):
    return bcrypt.check_password_hash(hashed_password, password)


def admin_required(fn):
    """jwt_required plus a role check; the admin user is exposed as ``g.admin``."""

    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = db.session.get(User, get_jwt_identity())
        if not user or not user.is_admin:
            return error_response("FORBIDDEN", "Admin access required", status=403)
        g.admin = user
        return fn(*args, **kwargs)

    return wrapper
