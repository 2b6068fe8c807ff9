from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from novalgo.schemas.referral_schema import ReferralLinkSchema, ReferralSummarySchema
from novalgo.services.referral_service import get_referral_summary, link_referral
from novalgo.utils.response_formatter import success_response

bp = Blueprint("referrals", __name__, url_prefix="/api/v1/referrals")


@bp.route("", methods=["GET"])
@jwt_required()
def summary():
    return success_response(ReferralSummarySchema().dump(get_referral_summary(get_jwt_identity())))


@bp.route("/link", methods=["POST"])
@jwt_required()
def link():
    """Apply a referral code after sign-up, if none was given at registration."""
    data = ReferralLinkSchema().load(request.get_json(silent=True) or {})
    link_referral(get_jwt_identity(), data["referral_code"])
    return success_response(message="Referral code applied", status=201)
