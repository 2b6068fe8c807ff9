from decimal import Decimal

import pytest

from novalgo.extensions import db
from novalgo.models.deposit import Deposit
from novalgo.models.transaction import Transaction
from novalgo.models.withdrawal import Withdrawal
from novalgo.services.deposit_service import (
    confirm_deposit,
    list_deposits,
    reject_deposit,
    submit_deposit,
)
from novalgo.services.ledger_service import get_wallet_snapshot, record_transaction
from novalgo.services.withdrawal_service import (
    approve_withdrawal,
    list_withdrawals,
    reject_withdrawal,
    request_withdrawal,
)
from novalgo.utils.exceptions import (
    InsufficientFunds,
    InvalidAmount,
    InvalidStateTransition,
    NotFound,
    ServiceError,
    UnknownUser,
)


def main_balance(user):
    return get_wallet_snapshot(user.id)["main_balance"]


class TestDeposits:

    def test_submit_has_no_ledger_effect(self, user):
        deposit = submit_deposit(user.id, 5000, "QWE12345XY")

        assert deposit.status == "pending"
        assert deposit.transaction_reference == "QWE12345XY"
        assert Transaction.query.count() == 0
        assert main_balance(user) == 0

    def test_below_minimum(self, user):
        with pytest.raises(InvalidAmount) as exc:
            submit_deposit(user.id, "999.99", "QWE12345XY")
        assert exc.value.details["minimum"] == "1000.00"
        assert Deposit.query.count() == 0

    def test_reference_required(self, user):
        with pytest.raises(ServiceError) as exc:
            submit_deposit(user.id, 5000, "   ")
        assert exc.value.code == "VALIDATION_ERROR"

    def test_unknown_user(self, app):
        with pytest.raises(UnknownUser):
            submit_deposit("missing", 5000, "QWE12345XY")

    def test_confirm_credits_wallet(self, user, admin):
        deposit = submit_deposit(user.id, 5000, "QWE12345XY")

        confirmed = confirm_deposit(deposit.id, admin_id=admin.id, admin_notes="Checked M-Pesa")

        assert confirmed.status == "confirmed"
        assert confirmed.processed_by == admin.id
        assert confirmed.processed_at is not None
        assert confirmed.admin_notes == "Checked M-Pesa"
        assert main_balance(user) == Decimal("5000.00")
        tx = Transaction.query.filter_by(reference_id=deposit.id).one()
        assert tx.type == "deposit"

    def test_reconfirm_is_a_no_op(self, user, admin):
        deposit = submit_deposit(user.id, 5000, "QWE12345XY")
        confirm_deposit(deposit.id, admin_id=admin.id)

        again = confirm_deposit(deposit.id, admin_id=admin.id)

        assert again.status == "confirmed"
        assert main_balance(user) == Decimal("5000.00")
        assert Transaction.query.filter_by(reference_id=deposit.id).count() == 1

    def test_reject_never_touches_ledger(self, user, admin):
        deposit = submit_deposit(user.id, 5000, "QWE12345XY")

        rejected = reject_deposit(deposit.id, admin_id=admin.id, admin_notes="No such payment")
        reject_deposit(deposit.id, admin_id=admin.id)

        assert rejected.status == "rejected"
        assert Transaction.query.count() == 0
        assert main_balance(user) == 0

    def test_terminal_states_are_final(self, user):
        rejected = submit_deposit(user.id, 5000, "REJECT0001")
        confirmed = submit_deposit(user.id, 5000, "CONFIRM001")
        reject_deposit(rejected.id)
        confirm_deposit(confirmed.id)

        with pytest.raises(InvalidStateTransition):
            confirm_deposit(rejected.id)
        with pytest.raises(InvalidStateTransition):
            reject_deposit(confirmed.id)

        db.session.expire_all()
        assert db.session.get(Deposit, rejected.id).status == "rejected"
        assert main_balance(user) == Decimal("5000.00")

    def test_unknown_deposit(self, app):
        with pytest.raises(NotFound):
            confirm_deposit("missing")

    def test_listing(self, make_user):
        alice, bob = make_user(), make_user()
        submit_deposit(alice.id, 1000, "ALICE00001")
        second = submit_deposit(alice.id, 2000, "ALICE00002")
        submit_deposit(bob.id, 3000, "BOB0000001")
        confirm_deposit(second.id)

        assert list_deposits(alice.id).count() == 2
        assert [d.id for d in list_deposits(alice.id, "confirmed")] == [second.id]
        assert all(d.user_id == bob.id for d in list_deposits(bob.id))

    def test_unknown_status_filter(self, user):
        with pytest.raises(ServiceError) as exc:
            list_deposits(user.id, "bogus")
        assert exc.value.status == 422
        with pytest.raises(ServiceError):
            list_withdrawals(user.id, "paid")

    def test_sub_cent_deposit_is_rejected(self, user):
        with pytest.raises(InvalidAmount):
            submit_deposit(user.id, "1000.001", "QWE12345XY")
        assert Deposit.query.count() == 0


class TestWithdrawals:

    def test_request_has_no_ledger_effect(self, make_user):
        user = make_user(balance=5000)

        withdrawal = request_withdrawal(user.id, 2000, "0712345678")

        assert withdrawal.status == "pending"
        assert main_balance(user) == Decimal("5000.00")
        assert Transaction.query.filter_by(type="withdrawal").count() == 0

    def test_below_minimum(self, make_user):
        user = make_user(balance=5000)
        with pytest.raises(InvalidAmount):
            request_withdrawal(user.id, 500, "0712345678")

    def test_preflight_insufficient_funds(self, make_user):
        user = make_user(balance=1500)
        with pytest.raises(InsufficientFunds):
            request_withdrawal(user.id, 2000, "0712345678")
        assert Withdrawal.query.count() == 0

    def test_approve_debits_wallet(self, make_user, admin):
        user = make_user(balance=5000)
        withdrawal = request_withdrawal(user.id, 2000, "0712345678")

        approved = approve_withdrawal(withdrawal.id, admin_id=admin.id)
        approve_withdrawal(withdrawal.id, admin_id=admin.id)

        assert approved.status == "approved"
        assert main_balance(user) == Decimal("3000.00")
        assert Transaction.query.filter_by(reference_id=withdrawal.id).count() == 1

    def test_approve_without_funds_rolls_back_status(self, make_user, admin):
        user = make_user(balance=3000)
        withdrawal = request_withdrawal(user.id, 2000, "0712345678")
        record_transaction(user.id, "withdrawal", 2500, "Spent elsewhere")

        with pytest.raises(InsufficientFunds):
            approve_withdrawal(withdrawal.id, admin_id=admin.id)

        db.session.expire_all()
        assert db.session.get(Withdrawal, withdrawal.id).status == "pending"
        assert main_balance(user) == Decimal("500.00")

        record_transaction(user.id, "deposit", 1500, "Top up")
        assert approve_withdrawal(withdrawal.id, admin_id=admin.id).status == "approved"
        assert main_balance(user) == 0

    def test_reject_never_touches_ledger(self, make_user, admin):
        user = make_user(balance=5000)
        withdrawal = request_withdrawal(user.id, 2000, "0712345678")

        reject_withdrawal(withdrawal.id, admin_id=admin.id, admin_notes="Suspicious")
        reject_withdrawal(withdrawal.id, admin_id=admin.id)

        assert Transaction.query.filter_by(type="withdrawal").count() == 0
        assert main_balance(user) == Decimal("5000.00")
        with pytest.raises(InvalidStateTransition):
            approve_withdrawal(withdrawal.id)

    def test_listing(self, make_user):
        user = make_user(balance=5000)
        request_withdrawal(user.id, 1000, "0712345678")

        assert list_withdrawals(user.id).count() == 1
        assert list_withdrawals(user.id, "approved").count() == 0
