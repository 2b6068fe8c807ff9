from flask import current_app

from novalgo.extensions import db
from novalgo.models.transaction import TransactionType
from novalgo.models.withdrawal import WITHDRAWAL_STATUSES, Withdrawal
from novalgo.services.ledger_service import apply_transaction, get_wallet_snapshot, run_atomic
from novalgo.services.lifecycle import claim_pending
from novalgo.utils.exceptions import InsufficientFunds, InvalidAmount, ServiceError
from novalgo.utils.money import parse_money
from novalgo.utils.row_scope import owned_by, with_status


def _request_withdrawal(user_id, amount, phone_number):
    amount = parse_money(amount)
    minimum = current_app.config["MIN_WITHDRAWAL_AMOUNT"]
    if amount < minimum:
        raise InvalidAmount(
            f"Minimum withdrawal amount is {minimum}",
            details={"minimum": str(minimum)},
        )
    phone = (phone_number or "").strip()
    if not phone:
        raise ServiceError("VALIDATION_ERROR", "Payout phone number is required", status=422)

    # Re-checked under the wallet lock on approval.
    balance = get_wallet_snapshot(user_id)["main_balance"]
    if amount > balance:
        raise InsufficientFunds(
            "You don't have enough balance for this withdrawal",
            details={"main_balance": str(balance), "amount": str(amount)},
        )

    withdrawal = Withdrawal(
        user_id=user_id,
        amount=amount,
        phone_number=phone,
        status="pending",
    )
    db.session.add(withdrawal)
    db.session.flush()
    return withdrawal


def request_withdrawal(user_id, amount, phone_number):
    return run_atomic(_request_withdrawal, user_id, amount, phone_number)


def _approve_withdrawal(withdrawal_id, admin_id, admin_notes):
    withdrawal, transitioned = claim_pending(
        Withdrawal, withdrawal_id, "approved", admin_id, admin_notes
    )
    if not transitioned:
        current_app.logger.info("Withdrawal %s already approved, ledger untouched", withdrawal_id)
        return withdrawal

    apply_transaction(
        withdrawal.user_id,
        TransactionType.WITHDRAWAL,
        withdrawal.amount,
        f"Withdrawal to {withdrawal.phone_number}",
        reference_id=withdrawal.id,
    )
    current_app.logger.info("Withdrawal %s approved by %s", withdrawal_id, admin_id)
    return withdrawal


def approve_withdrawal(withdrawal_id, admin_id=None, admin_notes=None):
    """pending -> approved plus the wallet debit; a short balance undoes both."""
    return run_atomic(_approve_withdrawal, withdrawal_id, admin_id, admin_notes)


def _reject_withdrawal(withdrawal_id, admin_id, admin_notes):
    withdrawal, transitioned = claim_pending(
        Withdrawal, withdrawal_id, "rejected", admin_id, admin_notes
    )
    if transitioned:
        current_app.logger.info("Withdrawal %s rejected by %s", withdrawal_id, admin_id)
    return withdrawal


def reject_withdrawal(withdrawal_id, admin_id=None, admin_notes=None):
    return run_atomic(_reject_withdrawal, withdrawal_id, admin_id, admin_notes)


def list_withdrawals(user_id, status=None):
    q = with_status(owned_by(Withdrawal, user_id), Withdrawal, status, WITHDRAWAL_STATUSES)
    return q.order_by(Withdrawal.created_at.desc())
