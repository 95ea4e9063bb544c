import logging

from flask import Blueprint
from sqlalchemy.exc import SQLAlchemyError

from utils.transactions import query
from utils.responses import fail, success

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    try:
        query("SELECT 1")
    except SQLAlchemyError:
        logger.exception("health check: database unreachable")
        return fail(503, "Database unavailable")
    return success(database="ok")
