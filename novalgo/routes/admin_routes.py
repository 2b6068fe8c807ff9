from flask import Blueprint, g, request

from novalgo.models.deposit import DEPOSIT_STATUSES, Deposit
from novalgo.models.withdrawal import WITHDRAWAL_STATUSES, Withdrawal
from novalgo.schemas.investment_schema import ProfitRequestSchema
from novalgo.schemas.payment_schema import AdminDecisionSchema, DepositSchema, WithdrawalSchema
from novalgo.schemas.wallet_schema import TransactionSchema
from novalgo.services.deposit_service import confirm_deposit, reject_deposit
from novalgo.services.investment_service import distribute_profit
from novalgo.services.withdrawal_service import approve_withdrawal, reject_withdrawal
from novalgo.utils.auth_utils import admin_required
from novalgo.utils.pagination import page_args, paginate_query
from novalgo.utils.response_formatter import success_response
from novalgo.utils.row_scope import with_status

bp = Blueprint("admin", __name__, url_prefix="/api/v1/admin")


def _decision():
    return AdminDecisionSchema().load(request.get_json(silent=True) or {})


def _queue(model, status, allowed):
    q = with_status(model.query, model, status, allowed)
    return q.order_by(model.created_at.desc())


# ==========================================================
#  Deposits
#    GET /admin/deposits?status=pending|confirmed|rejected
# ==========================================================
@bp.route("/deposits", methods=["GET"])
@admin_required
def admin_list_deposits():
    page, limit = page_args()
    q = _queue(Deposit, request.args.get("status"), DEPOSIT_STATUSES)
    items, pagination = paginate_query(q, page, limit)
    return success_response({
        "deposits": [
            dict(DepositSchema().dump(d), user_id=d.user_id) for d in items
        ],
        "pagination": pagination,
    })


@bp.route("/deposits/<deposit_id>/confirm", methods=["PATCH"])
@admin_required
def admin_confirm_deposit(deposit_id):
    notes = _decision()["admin_notes"]
    deposit = confirm_deposit(deposit_id, admin_id=g.admin.id, admin_notes=notes)
    return success_response({"deposit": DepositSchema().dump(deposit)}, message="Deposit confirmed")


@bp.route("/deposits/<deposit_id>/reject", methods=["PATCH"])
@admin_required
def admin_reject_deposit(deposit_id):
    notes = _decision()["admin_notes"]
    deposit = reject_deposit(deposit_id, admin_id=g.admin.id, admin_notes=notes)
    return success_response({"deposit": DepositSchema().dump(deposit)}, message="Deposit rejected")


# ==========================================================
#  Withdrawals
#    GET /admin/withdrawals?status=pending|approved|rejected
# ==========================================================
@bp.route("/withdrawals", methods=["GET"])
@admin_required
def admin_list_withdrawals():
    page, limit = page_args()
    q = _queue(Withdrawal, request.args.get("status"), WITHDRAWAL_STATUSES)
    items, pagination = paginate_query(q, page, limit)
    return success_response({
        "withdrawals": [
            dict(WithdrawalSchema().dump(w), user_id=w.user_id) for w in items
        ],
        "pagination": pagination,
    })


@bp.route("/withdrawals/<withdrawal_id>/approve", methods=["PATCH"])
@admin_required
def admin_approve_withdrawal(withdrawal_id):
    notes = _decision()["admin_notes"]
    withdrawal = approve_withdrawal(withdrawal_id, admin_id=g.admin.id, admin_notes=notes)
    return success_response(
        {"withdrawal": WithdrawalSchema().dump(withdrawal)}, message="Withdrawal approved"
    )


@bp.route("/withdrawals/<withdrawal_id>/reject", methods=["PATCH"])
@admin_required
def admin_reject_withdrawal(withdrawal_id):
    notes = _decision()["admin_notes"]
    withdrawal = reject_withdrawal(withdrawal_id, admin_id=g.admin.id, admin_notes=notes)
    return success_response(
        {"withdrawal": WithdrawalSchema().dump(withdrawal)}, message="Withdrawal rejected"
    )


# ==========================================================
#  POST /admin/investments/<id>/profits
# ==========================================================
@bp.route("/investments/<investment_id>/profits", methods=["POST"])
@admin_required
def admin_distribute_profit(investment_id):
    data = ProfitRequestSchema().load(request.get_json(silent=True) or {})
    tx = distribute_profit(investment_id, data["amount"])
    return success_response(
        {"transaction": TransactionSchema().dump(tx)}, message="Profit distributed", status=201
    )
