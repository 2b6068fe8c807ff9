from marshmallow import EXCLUDE, fields

from novalgo.extensions import ma
from novalgo.schemas.wallet_schema import money_field


class PackageSchema(ma.Schema):
    id = fields.String()
    name = fields.String()
    package_type = fields.String()
    minimum_amount = money_field()
    multiplier = money_field()
    duration_days = fields.Integer()
    description = fields.String(allow_none=True)
    features = fields.List(fields.String())


class InvestmentSchema(ma.Schema):
    id = fields.String()
    package_id = fields.String()
    package_name = fields.String()
    amount = money_field()
    expected_return = money_field()
    status = fields.String()
    start_date = fields.DateTime()
    end_date = fields.DateTime(allow_none=True)
    profit_distributed = money_field()
    progress = fields.Float()
    created_at = fields.DateTime()


class InvestmentRequestSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    package_id = fields.String(required=True)
    amount = fields.Decimal(load_default=None, allow_none=True)


class ProfitRequestSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    amount = fields.Decimal(required=True)
