from flask import current_app

from novalgo.extensions import db
from novalgo.models.deposit import DEPOSIT_STATUSES, Deposit
from novalgo.models.profile import Profile
from novalgo.models.transaction import TransactionType
from novalgo.models.wallet import Wallet
from novalgo.services.ledger_service import apply_transaction, run_atomic
from novalgo.services.lifecycle import claim_pending
from novalgo.services.referral_service import apply_referral_commission
from novalgo.utils.exceptions import InvalidAmount, ServiceError, UnknownUser
from novalgo.utils.money import parse_money
from novalgo.utils.row_scope import owned_by, with_status


def _submit_deposit(user_id, amount, transaction_reference):
    amount = parse_money(amount)
    minimum = current_app.config["MIN_DEPOSIT_AMOUNT"]
    if amount < minimum:
        raise InvalidAmount(
            f"Minimum deposit amount is {minimum}",
            details={"minimum": str(minimum)},
        )
    reference = (transaction_reference or "").strip()
    if not reference:
        raise ServiceError("VALIDATION_ERROR", "Transaction reference is required", status=422)
    if Wallet.query.filter_by(user_id=user_id).first() is None:
        raise UnknownUser(details={"user_id": user_id})

    deposit = Deposit(
        user_id=user_id,
        amount=amount,
        transaction_reference=reference,
        status="pending",
    )
    db.session.add(deposit)
    db.session.flush()
    return deposit


def submit_deposit(user_id, amount, transaction_reference):
    """Record a funding claim awaiting admin confirmation. No ledger effect."""
    return run_atomic(_submit_deposit, user_id, amount, transaction_reference)


def _confirm_deposit(deposit_id, admin_id, admin_notes):
    deposit, transitioned = claim_pending(Deposit, deposit_id, "confirmed", admin_id, admin_notes)
    if not transitioned:
        current_app.logger.info("Deposit %s already confirmed, ledger untouched", deposit_id)
        return deposit

    apply_transaction(
        deposit.user_id,
        TransactionType.DEPOSIT,
        deposit.amount,
        f"Deposit confirmed (ref {deposit.transaction_reference})",
        reference_id=deposit.id,
    )

    profile = Profile.query.filter_by(user_id=deposit.user_id).first()
    if profile is not None and profile.referred_by:
        apply_referral_commission(
            profile.referred_by,
            deposit.user_id,
            deposit.amount,
            reference_id=deposit.id,
        )

    current_app.logger.info("Deposit %s confirmed by %s", deposit_id, admin_id)
    return deposit


def confirm_deposit(deposit_id, admin_id=None, admin_notes=None):
    """
    pending -> confirmed, crediting the wallet and accruing the referrer's
    commission in the same transaction. Safe to call twice.
    """
    return run_atomic(_confirm_deposit, deposit_id, admin_id, admin_notes)


def _reject_deposit(deposit_id, admin_id, admin_notes):
    deposit, transitioned = claim_pending(Deposit, deposit_id, "rejected", admin_id, admin_notes)
    if transitioned:
        current_app.logger.info("Deposit %s rejected by %s", deposit_id, admin_id)
    return deposit


def reject_deposit(deposit_id, admin_id=None, admin_notes=None):
    return run_atomic(_reject_deposit, deposit_id, admin_id, admin_notes)


def list_deposits(user_id, status=None):
    q = with_status(owned_by(Deposit, user_id), Deposit, status, DEPOSIT_STATUSES)
    return q.order_by(Deposit.created_at.desc())
