from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.schemas.investment_schema import (
    InvestmentRequestSchema,
    InvestmentSchema,
    PackageSchema,
)
from novalgo.services.investment_service import (
    list_investments,
    list_packages,
    record_investment,
)
from novalgo.utils.pagination import page_args, paginate_query
from novalgo.utils.response_formatter import success_response

bp = Blueprint("investments", __name__, url_prefix="/api/v1")


# Package catalog is public.
@bp.route("/packages", methods=["GET"])
def packages():
    return success_response({"packages": PackageSchema(many=True).dump(list_packages())})


@bp.route("/investments", methods=["POST"])
@jwt_required()
def invest():
    data = InvestmentRequestSchema().load(request.get_json(silent=True) or {})
    investment = record_investment(get_jwt_identity(), data["package_id"], data.get("amount"))
    return success_response(
        {"investment": InvestmentSchema().dump(investment)},
        message=f"You have successfully invested {investment.amount} in the {investment.package_name}.",
        status=201,
    )


@bp.route("/investments", methods=["GET"])
@jwt_required()
def my_investments():
    page, limit = page_args()
    q = list_investments(get_jwt_identity(), request.args.get("status"))
    items, pagination = paginate_query(q, page, limit)
    return success_response({
        "investments": InvestmentSchema(many=True).dump(items),
        "pagination": pagination,
    })
