from flask import Blueprint
from sqlalchemy import text

from api.extensions import get_services

bp = Blueprint("health", __name__)


@bp.get("/healthz")
def healthz():
    """
    Readiness: the process is up and the database answers
    ---
    tags:
      - Health
    responses:
      200:
        description: Ready
      500:
        description: Database unreachable
    """
    get_services().storage.get_session().execute(text("SELECT 1"))
    return {"status": "ok"}, 200
