from marshmallow import Schema, fields, pre_load, validates, ValidationError, EXCLUDE

MIN_PASSWORD_LENGTH = 8


def normalize_email(v):
    """Emails are stored and looked up stripped and lowercased."""
    return v.strip().lower() if isinstance(v, str) else v


class _EmailNormalizingSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=normalize_email(data["email"]))
        return data


class UserCreateSchema(_EmailNormalizingSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")


class UserUpdateSchema(UserCreateSchema):
    """Self-update replaces both email and password; partial updates are rejected."""


class LoginSchema(_EmailNormalizingSchema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)
    expires_in = fields.Integer(data_key="expiresIn", allow_none=True, load_default=None)


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    is_chirpy_red = fields.Boolean(data_key="isChirpyRed")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
