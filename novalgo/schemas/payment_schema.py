from marshmallow import EXCLUDE, fields, validate

from novalgo.extensions import ma
from novalgo.schemas.wallet_schema import money_field


class DepositSchema(ma.Schema):
    id = fields.String()
    amount = money_field()
    transaction_reference = fields.String()
    status = fields.String()
    admin_notes = fields.String(allow_none=True)
    processed_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()


class DepositRequestSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    amount = fields.Decimal(required=True)
    transaction_reference = fields.String(
        required=True,
        validate=validate.Length(min=5, error="Transaction reference must be at least 5 characters"),
    )


class WithdrawalSchema(ma.Schema):
    id = fields.String()
    amount = money_field()
    phone_number = fields.String()
    status = fields.String()
    admin_notes = fields.String(allow_none=True)
    processed_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()


class WithdrawalRequestSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    amount = fields.Decimal(required=True)
    phone_number = fields.String(
        required=True,
        validate=validate.Length(min=10, error="Please enter a valid phone number"),
    )


class AdminDecisionSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    admin_notes = fields.String(load_default=None, allow_none=True)
