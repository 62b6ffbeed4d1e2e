from __future__ import annotations

import logging
from typing import Optional, List

from models.chirp import Chirp, MAX_CHIRP_LENGTH
from utils.decorators import authorize_ownership
from utils.errors import bad_request, not_found

logger = logging.getLogger("chirpy.chirps")

PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
MASK = "****"


def clean_body(body: str) -> str:
    """Mask profane words; only whole space-separated words, case-insensitive."""
    return " ".join(MASK if word.lower() in PROFANE_WORDS else word for word in body.split(" "))


def create_chirp(storage, user_id: str, body: str) -> Chirp:
    if len(body) > MAX_CHIRP_LENGTH:
        raise bad_request(f"Chirp is too long. Max length is {MAX_CHIRP_LENGTH}")
    return storage.create_chirp(clean_body(body), user_id)


def get_chirp(storage, chirp_id: str) -> Chirp:
    chirp = storage.get_chirp(chirp_id)
    if not chirp:
        raise not_found("Chirp not found")
    return chirp


def list_chirps(storage, author_id: Optional[str] = None, sort: Optional[str] = None) -> List[Chirp]:
    return storage.list_chirps(author_id=author_id, sort=(sort or "asc").lower())


def delete_chirp(storage, chirp_id: str, caller_id: str) -> None:
    # existence first, ownership second: 404 and 403 stay distinct
    chirp = get_chirp(storage, chirp_id)
    authorize_ownership(chirp.user_id, caller_id)
    storage.delete_chirp(chirp.id, caller_id)
    logger.info("Chirp %s deleted by owner", chirp.id)
