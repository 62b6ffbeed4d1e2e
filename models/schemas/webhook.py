from marshmallow import Schema, fields, EXCLUDE


class WebhookSchema(Schema):
    """
    Payment provider event: {"event": "...", "data": {"userId": "..."}}
    `data` is left raw; its shape only matters for events we act on.
    """

    class Meta:
        unknown = EXCLUDE

    event = fields.String(required=True)
    data = fields.Raw(allow_none=True, load_default=None)
