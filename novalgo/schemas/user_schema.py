from marshmallow import EXCLUDE, fields, validate

from novalgo.extensions import ma


class UserSchema(ma.Schema):
    id = fields.String()
    email = fields.Email()
    role = fields.String()
    created_at = fields.DateTime()


class ProfileSchema(ma.Schema):
    id = fields.String()
    user_id = fields.String()
    full_name = fields.String()
    phone = fields.String()
    email = fields.String()
    referral_code = fields.String()
    referred_by = fields.String(allow_none=True)
    experience_level = fields.String(allow_none=True)
    how_heard_about = fields.String(allow_none=True)
    terms_accepted = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class RegisterSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(required=True, validate=validate.Length(min=2))
    phone = fields.String(required=True, validate=validate.Length(min=10))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6))
    referral_code = fields.String(load_default=None, allow_none=True)
    experience_level = fields.String(load_default=None, allow_none=True)
    how_heard_about = fields.String(load_default=None, allow_none=True)
    terms_accepted = fields.Boolean(
        required=True,
        validate=validate.Equal(True, error="You must accept the terms and conditions"),
    )


class LoginSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class ChangePasswordSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    current_password = fields.String(required=True, load_only=True)
    new_password = fields.String(required=True, load_only=True, validate=validate.Length(min=6))


class ProfileUpdateSchema(ma.Schema):
    # referral_code and referred_by are deliberately absent: they never change.
    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(validate=validate.Length(min=2))
    phone = fields.String(validate=validate.Length(min=10))
    experience_level = fields.String(allow_none=True)
    how_heard_about = fields.String(allow_none=True)
