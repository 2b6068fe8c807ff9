from datetime import datetime, timedelta
from decimal import Decimal

from flask import current_app

from novalgo.extensions import db
from novalgo.models.investment import INVESTMENT_STATUSES, Investment, InvestmentPackage
from novalgo.models.transaction import TransactionType
from novalgo.models.user import gen_uuid
from novalgo.services.ledger_service import apply_transaction, run_atomic
from novalgo.utils.exceptions import InvalidAmount, InvalidStateTransition, NotFound
from novalgo.utils.money import positive_money, to_money
from novalgo.utils.row_scope import owned_by, with_status

DEFAULT_PACKAGES = [
    {
        "name": "Lite Package",
        "package_type": "lite",
        "minimum_amount": Decimal("10000.00"),
        "description": "Perfect for beginners starting their investment journey",
        "features": ["3x Returns", "Basic Support", "Monthly Reports"],
    },
    {
        "name": "Pro Package",
        "package_type": "pro",
        "minimum_amount": Decimal("30000.00"),
        "description": "Advanced investment package for serious investors",
        "features": ["3x Returns", "Priority Support", "Weekly Reports", "Advanced Analytics"],
    },
    {
        "name": "Elite Package",
        "package_type": "elite",
        "minimum_amount": Decimal("50000.00"),
        "description": "Premium investment package for high-net-worth individuals",
        "features": [
            "3x Returns",
            "Dedicated Support",
            "Daily Reports",
            "Premium Analytics",
            "Exclusive Opportunities",
        ],
    },
]


def seed_default_packages():
    created = 0
    for attrs in DEFAULT_PACKAGES:
        if InvestmentPackage.query.filter_by(package_type=attrs["package_type"]).first():
            continue
        db.session.add(InvestmentPackage(**attrs))
        created += 1
    db.session.commit()
    return created


def list_packages():
    return (
        InvestmentPackage.query
        .filter_by(active=True)
        .order_by(InvestmentPackage.minimum_amount)
        .all()
    )


def list_investments(user_id, status=None):
    q = with_status(owned_by(Investment, user_id), Investment, status, INVESTMENT_STATUSES)
    return q.order_by(Investment.created_at.desc())


def _record_investment(user_id, package_id, amount):
    package = db.session.get(InvestmentPackage, package_id)
    if package is None or not package.active:
        raise NotFound("Investment package not found", details={"package_id": package_id})

    amount = package.minimum_amount if amount is None else positive_money(amount)
    if amount < package.minimum_amount:
        raise InvalidAmount(
            f"Minimum investment for {package.name} is {package.minimum_amount}",
            details={"minimum_amount": str(package.minimum_amount)},
        )

    start = datetime.utcnow()
    investment = Investment(
        id=gen_uuid(),
        user_id=user_id,
        package_id=package.id,
        amount=amount,
        expected_return=to_money(amount * package.multiplier),
        status="active",
        start_date=start,
        end_date=start + timedelta(days=package.duration_days),
    )

    # The wallet debit runs before the investment row exists.
    apply_transaction(
        user_id,
        TransactionType.INVESTMENT,
        amount,
        f"Investment in {package.name} package",
        reference_id=investment.id,
    )
    db.session.add(investment)
    db.session.flush()
    return investment


def record_investment(user_id, package_id, amount=None):
    """Buy into a package; the investment and its ledger debit commit together."""
    investment = run_atomic(_record_investment, user_id, package_id, amount)
    current_app.logger.info(
        "User %s invested %s in package %s (investment %s)",
        user_id, investment.amount, package_id, investment.id,
    )
    return investment


def _distribute_profit(investment_id, amount):
    amount = positive_money(amount)
    investment = Investment.query.filter_by(id=investment_id).with_for_update().first()
    if investment is None:
        raise NotFound("Investment not found", details={"investment_id": investment_id})
    if investment.status != "active":
        raise InvalidStateTransition(f"Cannot distribute profit to a {investment.status} investment")

    updated = (
        Investment.query
        .filter(
            Investment.id == investment.id,
            Investment.status == "active",
            Investment.profit_distributed + amount <= Investment.expected_return,
        )
        .update(
            {Investment.profit_distributed: Investment.profit_distributed + amount},
            synchronize_session=False,
        )
    )
    if updated != 1:
        remaining = investment.expected_return - investment.profit_distributed
        raise InvalidAmount(
            "Profit exceeds the remaining expected return",
            details={"remaining": str(remaining)},
        )

    tx = apply_transaction(
        investment.user_id,
        TransactionType.PROFIT,
        amount,
        f"Profit from {investment.package_name} package",
        reference_id=investment.id,
    )

    db.session.refresh(investment)
    if investment.profit_distributed >= investment.expected_return:
        investment.status = "completed"
    return tx


def distribute_profit(investment_id, amount):
    return run_atomic(_distribute_profit, investment_id, amount)
