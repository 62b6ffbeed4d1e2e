import logging

from flask import Blueprint, current_app

from api.extensions import get_services
from utils.errors import forbidden

bp = Blueprint("admin", __name__)

logger = logging.getLogger("chirpy.admin")

METRICS_TEMPLATE = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>"""


@bp.get("/metrics")
def metrics():
    """
    File server hit count
    ---
    tags: [Admin]
    produces:
      - text/html
    responses:
      200: { description: HTML page with the hit count }
    """
    html = METRICS_TEMPLATE.format(hits=get_services().hits.value)
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


@bp.post("/reset")
def reset():
    """
    Reset the hit counter and delete every user (dev platform only)
    ---
    tags: [Admin]
    responses:
      200: { description: OK }
      403: { description: Not available outside dev }
    """
    if current_app.config.get("PLATFORM") != "dev":
        raise forbidden("This action is only available in dev mode")
    services = get_services()
    services.hits.reset()
    deleted = services.storage.delete_all_users()
    logger.warning("Admin reset: %d user(s) deleted", deleted)
    return "OK", 200, {"Content-Type": "text/plain; charset=utf-8"}
