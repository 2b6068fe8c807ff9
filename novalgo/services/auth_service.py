from datetime import timedelta

from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token

from novalgo.extensions import db
from novalgo.models.user import User
from novalgo.services.account_service import create_profile_and_wallet, retry_unique_violations
from novalgo.services.ledger_service import run_atomic
from novalgo.services.referral_service import create_referral
from novalgo.utils.auth_utils import check_password, hash_password
from novalgo.utils.exceptions import ServiceError


def _register(email, password_hash, profile_attributes, referral_code, role):
    if User.query.filter_by(email=email).first():
        raise ServiceError(
            code="USER_EXISTS",
            message="User with that email already exists",
            details={"field": "email"},
            status=409,
        )

    user = User(email=email, password_hash=password_hash, role=role)
    db.session.add(user)
    db.session.flush()

    create_profile_and_wallet(user.id, dict(profile_attributes, email=email))
    if referral_code:
        create_referral(user.id, referral_code)
    return user


def register_user(email, password, full_name, phone="", referral_code=None, role="investor", **profile_extras):
    """
    Create the login and provision its profile and wallet.

    User, profile, wallet and referral link are one transaction, so a bad
    referral code leaves no half-registered account behind.
    """
    email = email.strip().lower()
    attributes = dict(profile_extras, full_name=full_name, phone=phone)
    user = retry_unique_violations(
        _register, email, hash_password(password), attributes, referral_code, role
    )
    current_app.logger.info("Registered user %s", user.id)
    return user


def authenticate_user(email, password):
    user = User.query.filter_by(email=(email or "").strip().lower()).first()
    if not user or not check_password(password, user.password_hash):
        raise ServiceError(code="AUTH_FAILED", message="Invalid credentials", status=401)
    return user


def _change_password(user_id, current_password, new_password_hash):
    user = db.session.get(User, user_id)
    if not user or not check_password(current_password, user.password_hash):
        raise ServiceError(code="AUTH_FAILED", message="Current password is incorrect", status=401)
    user.password_hash = new_password_hash
    return user


def change_password(user_id, current_password, new_password):
    return run_atomic(_change_password, user_id, current_password, hash_password(new_password))


def generate_tokens_for_user(user):
    access = create_access_token(identity=user.id, expires_delta=timedelta(seconds=current_app.config.get("ACCESS_EXPIRES", 86400)))
    refresh = create_refresh_token(identity=user.id, expires_delta=timedelta(seconds=current_app.config.get("REFRESH_EXPIRES", 604800)))
    return access, refresh
