from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.schemas.wallet_schema import BonusTransferSchema, TransactionSchema, WalletSchema
from novalgo.services.ledger_service import (
    get_wallet_snapshot,
    list_transactions,
    transfer_referral_bonus,
)
from novalgo.utils.pagination import page_args, paginate_query
from novalgo.utils.response_formatter import success_response

bp = Blueprint("wallet", __name__, url_prefix="/api/v1/wallet")


@bp.route("", methods=["GET"])
@jwt_required()
def balance():
    snapshot = get_wallet_snapshot(get_jwt_identity())
    return success_response({
        "wallet": WalletSchema().dump(snapshot),
        "currency": current_app.config["CURRENCY"],
    })


@bp.route("/transactions", methods=["GET"])
@jwt_required()
def transactions():
    page, limit = page_args()
    q = list_transactions(get_jwt_identity(), request.args.get("type"))
    items, pagination = paginate_query(q, page, limit)
    return success_response({
        "transactions": TransactionSchema(many=True).dump(items),
        "pagination": pagination,
    })


@bp.route("/referral-bonus/transfer", methods=["POST"])
@jwt_required()
def transfer_bonus():
    data = BonusTransferSchema().load(request.get_json(silent=True) or {})
    uid = get_jwt_identity()
    tx = transfer_referral_bonus(uid, data.get("amount"))
    return success_response({
        "transaction": TransactionSchema().dump(tx),
        "wallet": WalletSchema().dump(get_wallet_snapshot(uid)),
    }, message="Referral bonus transferred to main balance")
