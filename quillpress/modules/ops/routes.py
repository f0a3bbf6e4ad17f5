"""
Ops Routes
==========

Public health endpoint.
"""

import logging

from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ...core.database import db, isoformat, utcnow
from . import ops_health_bp

logger = logging.getLogger(__name__)


def _check_database():
    try:
        db.session.execute(text('SELECT 1'))
        return 'ok'
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Health check database query failed: {e}")
        return 'error'


@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    database = _check_database()
    healthy = database == 'ok'
    data = {
        'status': 'OK' if healthy else 'ERROR',
        'timestamp': isoformat(utcnow()),
        'checks': {'database': database},
    }
    return jsonify(data), 200 if healthy else 503
