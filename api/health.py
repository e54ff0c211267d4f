import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from api import __version__
from models import storage

logger = logging.getLogger(__name__)

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Liveness plus a database round trip
    ---
    tags: [Health]
    responses:
      200:
        description: API and database are up
        schema:
          type: object
          properties:
            status: { type: string, example: ok }
            version: { type: string, example: 1.0.0 }
            database: { type: string, example: ok }
      503:
        description: Database unreachable
    """
    try:
        storage.get_session().execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check database error: %s", exc)
        return jsonify({"status": "degraded", "version": __version__, "database": "unreachable"}), 503
    return jsonify({"status": "ok", "version": __version__, "database": "ok"}), 200
