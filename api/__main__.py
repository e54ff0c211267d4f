"""
Development server for the trek CMS API:  python -m api

Production deployments serve create_app() from a WSGI server instead.
"""
import os

from . import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        host=os.getenv("FLASK_RUN_HOST", "127.0.0.1"),
        port=int(os.getenv("FLASK_RUN_PORT", "3000")),
        debug=app.config.get("DEBUG", False),
    )
