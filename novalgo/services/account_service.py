import hashlib

from flask import current_app
from sqlalchemy.exc import IntegrityError

from novalgo.extensions import db
from novalgo.models.profile import Profile
from novalgo.models.wallet import Wallet
from novalgo.services.ledger_service import run_atomic
from novalgo.utils.exceptions import Conflict, DuplicateAccount, UnknownUser

PROFILE_FIELDS = ("full_name", "phone", "email", "experience_level", "how_heard_about", "terms_accepted")
EDITABLE_PROFILE_FIELDS = ("full_name", "phone", "experience_level", "how_heard_about")


def generate_referral_code(user_id, attempt=0):
    """Prefix + uppercased md5 prefix of the user id; later attempts salt the id."""
    prefix = current_app.config["REFERRAL_CODE_PREFIX"]
    length = current_app.config["REFERRAL_CODE_LENGTH"]
    seed = str(user_id) if attempt == 0 else f"{user_id}:{attempt}"
    return prefix + hashlib.md5(seed.encode("utf-8")).hexdigest()[:length].upper()


def allocate_referral_code(user_id):
    for attempt in range(current_app.config["REFERRAL_CODE_MAX_ATTEMPTS"]):
        code = generate_referral_code(user_id, attempt)
        if not Profile.query.filter_by(referral_code=code).first():
            return code
        current_app.logger.warning("Referral code %s taken, retrying for user %s", code, user_id)
    raise Conflict("Could not allocate a unique referral code", details={"user_id": user_id})


def has_account(user_id):
    return (
        Profile.query.filter_by(user_id=user_id).first() is not None
        or Wallet.query.filter_by(user_id=user_id).first() is not None
    )


def create_profile_and_wallet(user_id, attributes):
    """Insert the profile/wallet pair without committing."""
    if has_account(user_id):
        raise DuplicateAccount(details={"user_id": user_id})

    values = {k: attributes[k] for k in PROFILE_FIELDS if attributes.get(k) is not None}
    values.setdefault("full_name", "User")
    values.setdefault("phone", "")
    values.setdefault("email", "")

    profile = Profile(user_id=user_id, referral_code=allocate_referral_code(user_id), **values)
    wallet = Wallet(user_id=user_id)
    db.session.add_all([profile, wallet])
    db.session.flush()

    return {
        "profile_id": profile.id,
        "wallet_id": wallet.id,
        "referral_code": profile.referral_code,
    }


def retry_unique_violations(work, *args):
    """
    Re-run an atomic unit after a unique-constraint race.

    The unit's own pre-checks turn a genuine duplicate into a domain error on
    the next pass; a lost race on a referral code just gets a fresh code.
    """
    attempts = current_app.config["REFERRAL_CODE_MAX_ATTEMPTS"]
    for attempt in range(1, attempts + 1):
        try:
            return run_atomic(work, *args)
        except IntegrityError as e:
            current_app.logger.warning(
                "Unique violation in %s (attempt %d/%d): %s",
                work.__name__, attempt, attempts, e.orig,
            )
    raise Conflict("Could not complete registration, please retry")


def provision_account(user_id, profile_attributes=None):
    result = retry_unique_violations(create_profile_and_wallet, user_id, profile_attributes or {})
    current_app.logger.info(
        "Provisioned account for user %s (referral code %s)", user_id, result["referral_code"]
    )
    return result


def get_profile(user_id):
    profile = Profile.query.filter_by(user_id=user_id).first()
    if profile is None:
        raise UnknownUser(details={"user_id": user_id})
    return profile


def _update_profile(user_id, changes):
    profile = get_profile(user_id)
    for field in EDITABLE_PROFILE_FIELDS:
        if field in changes:
            setattr(profile, field, changes[field])
    return profile


def update_profile(user_id, changes):
    return run_atomic(_update_profile, user_id, changes)
