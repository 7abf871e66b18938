from marshmallow import Schema, fields, pre_load, validate, validates, ValidationError

from models.user import Role


def _norm_username(v):
    return v.strip() if isinstance(v, str) else v


class UserRegisterSchema(Schema):
    username = fields.String(required=True, validate=validate.Length(min=1, max=100))
    password = fields.String(required=True, load_only=True)
    role = fields.Enum(Role, by_value=True, required=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "username" in data:
            data["username"] = _norm_username(data["username"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if not value:
            raise ValidationError("Password must not be empty.")


class UserLoginSchema(Schema):
    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "username" in data:
            data["username"] = _norm_username(data["username"])
        return data


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    username = fields.String()
    role = fields.Enum(Role, by_value=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
