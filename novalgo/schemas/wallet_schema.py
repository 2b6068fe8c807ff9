from marshmallow import EXCLUDE, fields

from novalgo.extensions import ma


def money_field(**kwargs):
    return fields.Decimal(places=2, as_string=True, **kwargs)


class WalletSchema(ma.Schema):
    main_balance = money_field()
    referral_bonus_balance = money_field()
    total_invested = money_field()
    total_profits = money_field()


class TransactionSchema(ma.Schema):
    id = fields.String()
    type = fields.String()
    amount = money_field()
    description = fields.String()
    reference_id = fields.String(allow_none=True)
    balance_before = money_field()
    balance_after = money_field()
    created_at = fields.DateTime()


class BonusTransferSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    amount = fields.Decimal(load_default=None, allow_none=True)
