from decimal import Decimal
from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func

BALANCE_FIELDS = ("main_balance", "referral_bonus_balance", "total_invested", "total_profits")


class Wallet(db.Model):
    __tablename__ = "wallets"

    __table_args__ = (
        db.CheckConstraint("main_balance >= 0", name="main_balance_non_negative"),
        db.CheckConstraint("referral_bonus_balance >= 0", name="referral_bonus_non_negative"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    user_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    main_balance = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    referral_bonus_balance = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    total_invested = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    total_profits = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now())

    user = db.relationship("User", back_populates="wallet")

    def snapshot(self):
        return {field: getattr(self, field) for field in BALANCE_FIELDS}
