"""
Development server: python -m api
"""
import os
from . import create_app

app = create_app()

if __name__ == "__main__":
    # production runs behind a WSGI server (gunicorn/uwsgi)
    app.run(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        debug=app.config.get("DEBUG", False),
    )
