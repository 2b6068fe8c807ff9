from marshmallow import EXCLUDE, fields

from novalgo.extensions import ma
from novalgo.schemas.wallet_schema import money_field


class ReferralSchema(ma.Schema):
    id = fields.String()
    referred_name = fields.String()
    referred_email = fields.String()
    total_deposits = money_field()
    commission_amount = money_field()
    created_at = fields.DateTime()


class ReferralSummarySchema(ma.Schema):
    referral_code = fields.String()
    referral_bonus_balance = money_field()
    total_commissions = money_field()
    total_referrals = fields.Integer()
    referrals = fields.List(fields.Nested(ReferralSchema))


class ReferralLinkSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    referral_code = fields.String(required=True)
