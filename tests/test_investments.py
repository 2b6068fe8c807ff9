from datetime import timedelta
from decimal import Decimal

import pytest

from novalgo.extensions import db
from novalgo.models.investment import Investment, InvestmentPackage
from novalgo.models.transaction import Transaction
from novalgo.services.investment_service import (
    DEFAULT_PACKAGES,
    distribute_profit,
    list_investments,
    list_packages,
    record_investment,
    seed_default_packages,
)
from novalgo.services.ledger_service import get_wallet_snapshot
from novalgo.utils.exceptions import (
    InsufficientFunds,
    InvalidAmount,
    InvalidStateTransition,
    NotFound,
    ServiceError,
    UnknownUser,
)


class TestCatalog:

    def test_seed_is_idempotent(self, app):
        assert seed_default_packages() == len(DEFAULT_PACKAGES)
        assert seed_default_packages() == 0
        assert InvestmentPackage.query.count() == 3

    def test_active_packages_by_minimum(self, packages):
        packages["pro"].active = False
        db.session.commit()

        assert [p.package_type for p in list_packages()] == ["lite", "elite"]

    def test_default_terms(self, lite):
        assert lite.minimum_amount == Decimal("10000.00")
        assert lite.multiplier == Decimal("3.00")
        assert lite.duration_days == 365
        assert "3x Returns" in lite.features


class TestRecordInvestment:

    def test_debits_wallet_and_sets_expected_return(self, make_user, lite):
        user = make_user(balance=15000)

        investment = record_investment(user.id, lite.id, 10000)

        assert investment.expected_return == Decimal("30000.00")
        assert investment.status == "active"
        assert investment.end_date - investment.start_date == timedelta(days=365)

        tx = Transaction.query.filter_by(user_id=user.id, type="investment").one()
        assert tx.amount == Decimal("10000.00")
        assert tx.reference_id == investment.id

        snapshot = get_wallet_snapshot(user.id)
        assert snapshot["main_balance"] == Decimal("5000.00")
        assert snapshot["total_invested"] == Decimal("10000.00")

    def test_amount_defaults_to_package_minimum(self, make_user, packages):
        user = make_user(balance=60000)
        investment = record_investment(user.id, packages["elite"].id)
        assert investment.amount == Decimal("50000.00")

    def test_insufficient_funds_leaves_no_investment(self, make_user, lite):
        user = make_user(balance=5000)

        with pytest.raises(InsufficientFunds):
            record_investment(user.id, lite.id, 10000)

        assert Investment.query.count() == 0
        assert Transaction.query.filter_by(type="investment").count() == 0
        assert get_wallet_snapshot(user.id)["main_balance"] == Decimal("5000.00")

    def test_below_package_minimum(self, make_user, lite):
        user = make_user(balance=20000)
        with pytest.raises(InvalidAmount):
            record_investment(user.id, lite.id, "9999.99")
        assert Investment.query.count() == 0

    @pytest.mark.parametrize("amount", [0, -10000])
    def test_non_positive_amount(self, make_user, lite, amount):
        user = make_user(balance=20000)
        with pytest.raises(InvalidAmount):
            record_investment(user.id, lite.id, amount)

    def test_unknown_or_inactive_package(self, make_user, lite):
        user = make_user(balance=20000)
        with pytest.raises(NotFound):
            record_investment(user.id, "no-such-package", 10000)

        lite.active = False
        db.session.commit()
        with pytest.raises(NotFound):
            record_investment(user.id, lite.id, 10000)

    def test_unknown_user(self, lite):
        with pytest.raises(UnknownUser):
            record_investment("missing", lite.id, 10000)
        assert Investment.query.count() == 0

    def test_listing_is_owner_scoped(self, make_user, lite):
        alice = make_user(balance=20000)
        bob = make_user(balance=20000)
        record_investment(alice.id, lite.id)

        assert list_investments(alice.id).count() == 1
        assert list_investments(bob.id).count() == 0
        assert list_investments(alice.id, "completed").count() == 0
        with pytest.raises(ServiceError) as exc:
            list_investments(alice.id, "bogus")
        assert exc.value.code == "VALIDATION_ERROR"


class TestProfitDistribution:

    @pytest.fixture
    def investment(self, make_user, lite):
        user = make_user(balance=10000)
        return record_investment(user.id, lite.id)

    def test_profit_credits_main_balance(self, investment):
        tx = distribute_profit(investment.id, 2500)

        assert tx.type == "profit"
        assert tx.reference_id == investment.id
        snapshot = get_wallet_snapshot(investment.user_id)
        assert snapshot["main_balance"] == Decimal("2500.00")
        assert snapshot["total_profits"] == Decimal("2500.00")

        db.session.refresh(investment)
        assert investment.profit_distributed == Decimal("2500.00")
        assert investment.status == "active"

    def test_full_payout_completes_investment(self, investment):
        distribute_profit(investment.id, 20000)
        distribute_profit(investment.id, 10000)

        db.session.refresh(investment)
        assert investment.status == "completed"
        assert investment.profit_distributed == investment.expected_return

        with pytest.raises(InvalidStateTransition):
            distribute_profit(investment.id, 1)

    def test_profit_beyond_expected_return(self, investment):
        distribute_profit(investment.id, 29000)

        with pytest.raises(InvalidAmount) as exc:
            distribute_profit(investment.id, "1000.01")

        assert exc.value.details["remaining"] == "1000.00"
        assert Transaction.query.filter_by(type="profit").count() == 1

    def test_unknown_investment(self, app):
        with pytest.raises(NotFound):
            distribute_profit("missing", 100)

    def test_non_positive_profit(self, investment):
        with pytest.raises(InvalidAmount):
            distribute_profit(investment.id, 0)
