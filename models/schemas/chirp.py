from marshmallow import Schema, fields, validate, EXCLUDE


class ChirpCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    body = fields.String(required=True, validate=validate.Length(min=1))


class ChirpOutSchema(Schema):
    id = fields.String()
    body = fields.String()
    user_id = fields.String(data_key="userId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
