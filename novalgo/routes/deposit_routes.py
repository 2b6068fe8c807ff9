from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.schemas.payment_schema import DepositRequestSchema, DepositSchema
from novalgo.services.deposit_service import list_deposits, submit_deposit
from novalgo.utils.pagination import page_args, paginate_query
from novalgo.utils.response_formatter import success_response

bp = Blueprint("deposits", __name__, url_prefix="/api/v1/deposits")


@bp.route("", methods=["POST"])
@jwt_required()
def create_deposit():
    data = DepositRequestSchema().load(request.get_json(silent=True) or {})
    deposit = submit_deposit(get_jwt_identity(), data["amount"], data["transaction_reference"])
    return success_response(
        {"deposit": DepositSchema().dump(deposit)},
        message="Your deposit request has been submitted and is pending admin approval.",
        status=201,
    )


@bp.route("", methods=["GET"])
@jwt_required()
def my_deposits():
    page, limit = page_args()
    q = list_deposits(get_jwt_identity(), request.args.get("status"))
    items, pagination = paginate_query(q, page, limit)
    return success_response({
        "deposits": DepositSchema(many=True).dump(items),
        "pagination": pagination,
    })
