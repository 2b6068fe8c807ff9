from datetime import datetime
from decimal import Decimal
from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func

PACKAGE_TYPES = ("lite", "pro", "elite")
INVESTMENT_STATUSES = ("pending", "active", "completed", "cancelled")


class InvestmentPackage(db.Model):
    __tablename__ = "investment_packages"

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    name = db.Column(db.String(100), nullable=False)
    package_type = db.Column(
        db.Enum(*PACKAGE_TYPES, name="package_type"),
        unique=True,
        nullable=False,
    )
    minimum_amount = db.Column(db.Numeric(15, 2), nullable=False)
    multiplier = db.Column(db.Numeric(5, 2), nullable=False, default=Decimal("3.00"))
    duration_days = db.Column(db.Integer, nullable=False, default=365)
    description = db.Column(db.Text)
    features = db.Column(db.JSON, default=list)
    active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, server_default=func.now())


class Investment(db.Model):
    __tablename__ = "investments"

    __table_args__ = (
        db.Index("idx_investments_user_status", "user_id", "status"),
        db.CheckConstraint("profit_distributed <= expected_return", name="profit_within_expected"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    user_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    package_id = db.Column(db.String(50), db.ForeignKey("investment_packages.id"), nullable=False)

    amount = db.Column(db.Numeric(15, 2), nullable=False)
    expected_return = db.Column(db.Numeric(15, 2), nullable=False)
    status = db.Column(
        db.Enum(*INVESTMENT_STATUSES, name="investment_status"),
        nullable=False,
        default="active",
    )

    start_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    end_date = db.Column(db.DateTime)
    profit_distributed = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    created_at = db.Column(db.DateTime, server_default=func.now())

    package = db.relationship("InvestmentPackage")

    @property
    def package_name(self):
        return self.package.name if self.package else None

    @property
    def progress(self):
        """Percent of the investment term elapsed, 0..100."""
        if not self.start_date or not self.end_date:
            return 0.0
        total = (self.end_date - self.start_date).total_seconds()
        if total <= 0:
            return 100.0
        elapsed = (datetime.utcnow() - self.start_date).total_seconds()
        return round(max(0.0, min(100.0, elapsed / total * 100)), 2)
