import time

from flask import current_app
from sqlalchemy.exc import OperationalError

from novalgo.extensions import db
from novalgo.models.transaction import Transaction, TransactionType
from novalgo.models.wallet import Wallet
from novalgo.utils.exceptions import (
    Conflict,
    InsufficientFunds,
    InvalidAmount,
    InvalidTransactionType,
    UnknownUser,
)
from novalgo.utils.money import positive_money
from novalgo.utils.row_scope import owned_by

# kind -> {wallet column: +1 credit / -1 debit}
BALANCE_EFFECTS = {
    TransactionType.DEPOSIT: {"main_balance": 1},
    TransactionType.WITHDRAWAL: {"main_balance": -1},
    TransactionType.INVESTMENT: {"main_balance": -1, "total_invested": 1},
    TransactionType.PROFIT: {"main_balance": 1, "total_profits": 1},
    TransactionType.REFERRAL_COMMISSION: {"referral_bonus_balance": 1},
    TransactionType.REFERRAL_BONUS_TRANSFER: {"main_balance": 1, "referral_bonus_balance": -1},
}

# serialization_failure, deadlock_detected
TRANSIENT_PGCODES = {"40001", "40P01"}


def snapshot_field(tx_type):
    """Balance captured in balance_before/balance_after for this kind."""
    if tx_type == TransactionType.REFERRAL_COMMISSION:
        return "referral_bonus_balance"
    return "main_balance"


def parse_transaction_type(value):
    try:
        return TransactionType(value)
    except ValueError:
        raise InvalidTransactionType(
            f"Unknown transaction type: {value!r}",
            details={"allowed": [t.value for t in TransactionType]},
        )


def is_transient(error):
    orig = getattr(error, "orig", None)
    if getattr(orig, "pgcode", None) in TRANSIENT_PGCODES:
        return True
    return "database is locked" in str(orig)


def run_atomic(work, *args, **kwargs):
    """
    Run ``work`` as a single database transaction.

    Commits when ``work`` returns, rolls back on any exception. Serialization
    failures and deadlocks are retried with a linear backoff; once
    LEDGER_MAX_RETRIES attempts are spent the caller gets ``Conflict``.
    """
    attempts = current_app.config.get("LEDGER_MAX_RETRIES", 3)
    backoff = current_app.config.get("LEDGER_RETRY_BACKOFF", 0.05)

    for attempt in range(1, attempts + 1):
        try:
            result = work(*args, **kwargs)
            db.session.commit()
            return result
        except OperationalError as e:
            db.session.rollback()
            if not is_transient(e):
                raise
            current_app.logger.warning(
                "Transient conflict in %s (attempt %d/%d): %s",
                work.__name__, attempt, attempts, e.orig,
            )
            if attempt < attempts:
                time.sleep(backoff * attempt)
        except Exception:
            db.session.rollback()
            raise

    raise Conflict(details={"attempts": attempts})


def apply_transaction(user_id, tx_type, amount, description, reference_id=None):
    """
    Append a ledger entry and apply its balance delta, without committing.

    Composite operations call this inside their own ``run_atomic`` unit.
    The funds check and the mutation are one conditional UPDATE on the locked
    wallet row, so a stale read can never authorise a debit.
    """
    tx_type = parse_transaction_type(tx_type)
    amount = positive_money(amount)

    wallet = Wallet.query.filter_by(user_id=user_id).with_for_update().first()
    if wallet is None:
        raise UnknownUser(details={"user_id": user_id})

    effects = BALANCE_EFFECTS[tx_type]
    guards = [Wallet.id == wallet.id]
    changes = {}
    for field, sign in effects.items():
        column = getattr(Wallet, field)
        if sign > 0:
            changes[column] = column + amount
        else:
            changes[column] = column - amount
            guards.append(column >= amount)

    updated = Wallet.query.filter(*guards).update(changes, synchronize_session=False)
    if updated != 1:
        raise InsufficientFunds(
            details={"user_id": user_id, "type": tx_type.value, "amount": str(amount)}
        )

    db.session.refresh(wallet)
    field = snapshot_field(tx_type)
    balance_after = getattr(wallet, field)
    balance_before = balance_after - effects[field] * amount

    tx = Transaction(
        user_id=user_id,
        type=tx_type.value,
        amount=amount,
        description=description,
        reference_id=reference_id,
        balance_before=balance_before,
        balance_after=balance_after,
    )
    db.session.add(tx)
    db.session.flush()

    current_app.logger.info(
        "ledger %s user=%s amount=%s %s: %s -> %s ref=%s",
        tx_type.value, user_id, amount, field, balance_before, balance_after, reference_id,
    )
    return tx


def record_transaction(user_id, tx_type, amount, description, reference_id=None):
    return run_atomic(apply_transaction, user_id, tx_type, amount, description, reference_id)


def get_wallet_snapshot(user_id):
    wallet = Wallet.query.filter_by(user_id=user_id).first()
    if wallet is None:
        raise UnknownUser(details={"user_id": user_id})
    return wallet.snapshot()


def _transfer_referral_bonus(user_id, amount):
    if amount is None:
        wallet = Wallet.query.filter_by(user_id=user_id).with_for_update().first()
        if wallet is None:
            raise UnknownUser(details={"user_id": user_id})
        amount = wallet.referral_bonus_balance
        if amount <= 0:
            raise InvalidAmount("No referral bonus available to transfer")

    return apply_transaction(
        user_id,
        TransactionType.REFERRAL_BONUS_TRANSFER,
        amount,
        "Referral bonus transfer to main balance",
    )


def transfer_referral_bonus(user_id, amount=None):
    """Move referral bonus into the main balance; ``None`` moves all of it."""
    return run_atomic(_transfer_referral_bonus, user_id, amount)


def list_transactions(user_id, tx_type=None):
    q = owned_by(Transaction, user_id)
    if tx_type:
        q = q.filter(Transaction.type == parse_transaction_type(tx_type).value)
    return q.order_by(Transaction.created_at.desc(), Transaction.id)
