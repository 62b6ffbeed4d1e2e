from flask import Blueprint, request

from api.extensions import get_services
from models.schemas.webhook import WebhookSchema
from utils.decorators import get_api_key

bp = Blueprint("webhooks", __name__)

webhook_schema = WebhookSchema()


@bp.post("/polka/webhooks")
def polka_webhook():
    """
    Payment provider webhook; safe to deliver more than once.
    ---
    tags: [Webhooks]
    security:
      - ApiKey: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            event: { type: string, example: user.upgraded }
            data:
              type: object
              properties:
                userId: { type: string }
    responses:
      204: { description: Accepted (or ignored) }
      400: { description: Malformed payload }
      401: { description: Bad API key }
      404: { description: Unknown user }
    """
    gate = get_services().webhooks
    api_key = get_api_key(request)
    # key before payload: a bad key is 401 whatever the body
    gate.check_key(api_key)
    payload = webhook_schema.load(request.get_json(silent=True) or {})
    gate.handle(api_key, payload)
    return ("", 204)
