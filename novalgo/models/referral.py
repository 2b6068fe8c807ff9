from decimal import Decimal
from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func


class Referral(db.Model):
    __tablename__ = "referrals"

    __table_args__ = (
        db.UniqueConstraint("referrer_id", "referred_id", name="uq_referrals_pair"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    referrer_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referred_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    commission_amount = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    total_deposits = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    created_at = db.Column(db.DateTime, server_default=func.now())
