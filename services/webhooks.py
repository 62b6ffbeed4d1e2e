"""
Payment provider webhook.

Only `user.upgraded` does anything; every other event is acknowledged so
the sender stops retrying. Replays converge on the same end state.
"""
from __future__ import annotations

import hmac
import logging
from typing import Mapping, Any

from utils.errors import unauthorized, not_found, bad_request

logger = logging.getLogger("chirpy.webhooks")

UPGRADE_EVENT = "user.upgraded"


class WebhookGate:
    def __init__(self, storage, api_key: str):
        self.storage = storage
        self.api_key = api_key

    def check_key(self, presented: str) -> None:
        if not self.api_key or not hmac.compare_digest(presented.encode(), self.api_key.encode()):
            raise unauthorized("Invalid API key")

    def handle(self, presented_key: str, payload: Mapping[str, Any]) -> bool:
        """
        Returns True when this delivery flipped the flag, False when nothing changed.
        """
        self.check_key(presented_key)

        event = payload.get("event")
        if event != UPGRADE_EVENT:
            logger.info("Ignoring webhook event %r", event)
            return False

        data = payload.get("data")
        user_id = data.get("userId") if isinstance(data, dict) else None
        if not isinstance(user_id, str) or not user_id:
            raise bad_request("data.userId is required")

        user = self.storage.get_user(user_id)
        if not user:
            raise not_found("User not found")
        if user.is_chirpy_red:
            return False

        # a concurrent delivery may win the update; both outcomes are fine
        upgraded = self.storage.upgrade_user(user_id)
        if upgraded:
            logger.info("User %s upgraded", user_id)
        return upgraded
