"""Row-level authorization: every user-facing read goes through ``owned_by``."""

from sqlalchemy import or_

from novalgo.models.referral import Referral
from novalgo.utils.exceptions import ServiceError


def owned_by(model, user_id):
    if model is Referral:
        return Referral.query.filter(
            or_(Referral.referrer_id == user_id, Referral.referred_id == user_id)
        )
    return model.query.filter(model.user_id == user_id)


def with_status(query, model, status, allowed):
    """Filter ``query`` on ``model.status``; unknown values never reach the enum column."""
    if not status:
        return query
    if status not in allowed:
        raise ServiceError(
            "VALIDATION_ERROR",
            f"Unknown status: {status!r}",
            details={"status": status, "allowed": list(allowed)},
            status=422,
        )
    return query.filter(model.status == status)
