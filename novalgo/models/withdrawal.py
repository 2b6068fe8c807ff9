from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func

WITHDRAWAL_STATUSES = ("pending", "approved", "rejected")


class Withdrawal(db.Model):
    __tablename__ = "withdrawals"

    __table_args__ = (
        db.Index("idx_withdrawals_user_status", "user_id", "status"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    user_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    amount = db.Column(db.Numeric(15, 2), nullable=False)
    phone_number = db.Column(db.String(30), nullable=False)
    status = db.Column(
        db.Enum(*WITHDRAWAL_STATUSES, name="withdrawal_status"),
        nullable=False,
        default="pending",
    )

    admin_notes = db.Column(db.Text)
    processed_by = db.Column(db.String(50), db.ForeignKey("users.id"))
    processed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, server_default=func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref="withdrawals")
