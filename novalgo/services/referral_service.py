from decimal import Decimal, InvalidOperation

from flask import current_app

from novalgo.extensions import db
from novalgo.models.profile import Profile
from novalgo.models.referral import Referral
from novalgo.models.transaction import TransactionType
from novalgo.services.ledger_service import apply_transaction, run_atomic
from novalgo.utils.exceptions import (
    InvalidAmount,
    NotFound,
    ServiceError,
    UnknownUser,
)
from novalgo.utils.money import ZERO, positive_money, to_money


def commission_rate(rate=None):
    if rate is None:
        rate = current_app.config["REFERRAL_COMMISSION_RATE"]
    try:
        rate = Decimal(str(rate))
    except InvalidOperation:
        raise InvalidAmount(f"Invalid commission rate: {rate!r}")
    if not rate.is_finite() or rate <= 0 or rate > 1:
        raise InvalidAmount("Commission rate must be greater than 0 and at most 1")
    return rate


def create_referral(referred_user_id, referral_code):
    """Attach a new account to the owner of ``referral_code``, without committing."""
    code = (referral_code or "").strip().upper()
    referrer = Profile.query.filter_by(referral_code=code).first()
    if referrer is None:
        raise NotFound("Referral code not found", details={"referral_code": code})
    if referrer.user_id == referred_user_id:
        raise ServiceError("INVALID_REFERRAL", "You cannot use your own referral code")

    profile = Profile.query.filter_by(user_id=referred_user_id).first()
    if profile is None:
        raise UnknownUser(details={"user_id": referred_user_id})
    if profile.referred_by:
        raise ServiceError("INVALID_REFERRAL", "Referral already recorded", status=409)

    profile.referred_by = referrer.user_id
    referral = Referral(referrer_id=referrer.user_id, referred_id=referred_user_id)
    db.session.add(referral)
    db.session.flush()

    current_app.logger.info("User %s referred by %s", referred_user_id, referrer.user_id)
    return referral


def link_referral(referred_user_id, referral_code):
    return run_atomic(create_referral, referred_user_id, referral_code)


def apply_referral_commission(referrer_id, referred_id, deposit_amount, rate=None, reference_id=None):
    deposit_amount = positive_money(deposit_amount)
    rate = commission_rate(rate)
    commission = to_money(deposit_amount * rate)
    if commission <= ZERO:
        raise InvalidAmount(
            "Commission rounds to zero",
            details={"deposit_amount": str(deposit_amount), "rate": str(rate)},
        )

    updated = (
        Referral.query
        .filter_by(referrer_id=referrer_id, referred_id=referred_id)
        .update(
            {
                Referral.total_deposits: Referral.total_deposits + deposit_amount,
                Referral.commission_amount: Referral.commission_amount + commission,
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        raise NotFound(
            "Referral relationship not found",
            details={"referrer_id": referrer_id, "referred_id": referred_id},
        )

    return apply_transaction(
        referrer_id,
        TransactionType.REFERRAL_COMMISSION,
        commission,
        f"Referral commission on deposit of {deposit_amount}",
        reference_id=reference_id,
    )


def accrue_referral_commission(referrer_id, referred_id, deposit_amount, rate=None, reference_id=None):
    return run_atomic(
        apply_referral_commission, referrer_id, referred_id, deposit_amount, rate, reference_id
    )


def get_referral_summary(user_id):
    profile = Profile.query.filter_by(user_id=user_id).first()
    if profile is None or profile.user.wallet is None:
        raise UnknownUser(details={"user_id": user_id})

    rows = (
        db.session.query(Referral, Profile)
        .join(Profile, Profile.user_id == Referral.referred_id)
        .filter(Referral.referrer_id == user_id)
        .order_by(Referral.created_at.desc())
        .all()
    )

    referrals = [
        {
            "id": referral.id,
            "referred_name": referred.full_name,
            "referred_email": referred.email,
            "total_deposits": referral.total_deposits,
            "commission_amount": referral.commission_amount,
            "created_at": referral.created_at,
        }
        for referral, referred in rows
    ]

    return {
        "referral_code": profile.referral_code,
        "referral_bonus_balance": profile.user.wallet.referral_bonus_balance,
        "total_commissions": sum((r["commission_amount"] for r in referrals), ZERO),
        "total_referrals": len(referrals),
        "referrals": referrals,
    }
