from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func

DEPOSIT_STATUSES = ("pending", "confirmed", "rejected")


class Deposit(db.Model):
    __tablename__ = "deposits"

    __table_args__ = (
        db.Index("idx_deposits_user_status", "user_id", "status"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    user_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    amount = db.Column(db.Numeric(15, 2), nullable=False)
    transaction_reference = db.Column(db.String(100), nullable=False)
    status = db.Column(
        db.Enum(*DEPOSIT_STATUSES, name="deposit_status"),
        nullable=False,
        default="pending",
    )

    admin_notes = db.Column(db.Text)
    processed_by = db.Column(db.String(50), db.ForeignKey("users.id"))
    processed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, server_default=func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref="deposits")
