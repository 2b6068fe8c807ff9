from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.schemas.payment_schema import WithdrawalRequestSchema, WithdrawalSchema
from novalgo.services.withdrawal_service import list_withdrawals, request_withdrawal
from novalgo.utils.pagination import page_args, paginate_query
from novalgo.utils.response_formatter import success_response

bp = Blueprint("withdrawals", __name__, url_prefix="/api/v1/withdrawals")


@bp.route("", methods=["POST"])
@jwt_required()
def create_withdrawal():
    data = WithdrawalRequestSchema().load(request.get_json(silent=True) or {})
    withdrawal = request_withdrawal(get_jwt_identity(), data["amount"], data["phone_number"])
    return success_response(
        {"withdrawal": WithdrawalSchema().dump(withdrawal)},
        message="Your withdrawal request has been submitted and is pending admin approval.",
        status=201,
    )


@bp.route("", methods=["GET"])
@jwt_required()
def my_withdrawals():
    page, limit = page_args()
    q = list_withdrawals(get_jwt_identity(), request.args.get("status"))
    items, pagination = paginate_query(q, page, limit)
    return success_response({
        "withdrawals": WithdrawalSchema(many=True).dump(items),
        "pagination": pagination,
    })
