from enum import Enum
from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INVESTMENT = "investment"
    PROFIT = "profit"
    REFERRAL_COMMISSION = "referral_commission"
    REFERRAL_BONUS_TRANSFER = "referral_bonus_transfer"


TRANSACTION_TYPES = tuple(t.value for t in TransactionType)


class Transaction(db.Model):
    """Append-only ledger entry. Rows are inserted by the ledger service only."""

    __tablename__ = "transactions"

    __table_args__ = (
        db.Index("idx_transactions_user_created", "user_id", "created_at"),
        db.CheckConstraint("amount > 0", name="amount_positive"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    user_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    type = db.Column(db.Enum(*TRANSACTION_TYPES, name="transaction_type"), nullable=False)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    description = db.Column(db.Text, nullable=False)

    # Deposit, withdrawal, investment or referral this entry settles.
    reference_id = db.Column(db.String(50), index=True)

    balance_before = db.Column(db.Numeric(15, 2), nullable=False)
    balance_after = db.Column(db.Numeric(15, 2), nullable=False)

    created_at = db.Column(db.DateTime, server_default=func.now())
