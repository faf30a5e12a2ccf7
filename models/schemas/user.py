from marshmallow import fields, pre_load, validates, validate, ValidationError

from models.schemas.common import CamelCaseSchema

USERNAME_PATTERN = r"^[A-Za-z0-9_]{3,30}$"
EMAIL_MAX_LENGTH = 255


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _check_password(value):
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters long.")


class RegisterSchema(CamelCaseSchema):
    username = fields.String(
        required=True,
        validate=validate.Regexp(USERNAME_PATTERN, error="Username must be 3-30 letters, digits or underscores."),
    )
    email = fields.Email(required=True, validate=validate.Length(max=EMAIL_MAX_LENGTH))
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)


class LoginSchema(CamelCaseSchema):
    email_or_username = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, validate=validate.Length(min=1))


class LogoutSchema(CamelCaseSchema):
    refresh_token = fields.String(load_default=None, allow_none=True)


class UserUpdateSchema(CamelCaseSchema):
    username = fields.String(
        validate=validate.Regexp(USERNAME_PATTERN, error="Username must be 3-30 letters, digits or underscores.")
    )
    email = fields.Email(validate=validate.Length(max=EMAIL_MAX_LENGTH))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class ChangePasswordSchema(CamelCaseSchema):
    current_password = fields.String(required=True)
    new_password = fields.String(required=True)

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        _check_password(value)


class DeleteAccountSchema(CamelCaseSchema):
    password = fields.String(required=True)


class UserOutSchema(CamelCaseSchema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    is_active = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
