from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from api.metrics import HitCounter
from services.sessions import SessionManager
from services.webhooks import WebhookGate

EXTENSION_KEY = "chirpy"


@dataclass
class Services:
    storage: object
    sessions: SessionManager
    webhooks: WebhookGate
    hits: HitCounter


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
