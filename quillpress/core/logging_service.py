"""
Centralized logging service for Quillpress.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
import traceback
from datetime import timedelta

from flask import current_app, has_app_context, has_request_context, request
from sqlalchemy import delete, insert

from .database import db, utcnow

console = logging.getLogger('quillpress')


class AppLog(db.Model):
    __tablename__ = 'app_logs'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    level = db.Column(db.String(16), nullable=False, index=True)
    source = db.Column(db.String(64), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(500))
    request_path = db.Column(db.String(500))
    user_id = db.Column(db.String(32))


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')[:500]
        return ip_address, user_agent, request.path

    @staticmethod
    def _persistence_enabled():
        return has_app_context() and current_app.config.get('PERSIST_APP_LOGS', True)

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the console and, when enabled, to the app_logs table.

        The insert runs on its own connection so it never joins (or commits)
        the request's ORM transaction.

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (auth, posts, documentation, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        console.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        if not LoggingService._persistence_enabled():
            return

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        ip_address, user_agent, request_path = LoggingService._get_request_context()

        try:
            with db.engine.begin() as conn:
                conn.execute(insert(AppLog.__table__).values(
                    timestamp=utcnow(),
                    level=level,
                    source=source,
                    message=message,
                    details=details,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    request_path=request_path,
                    user_id=user_id,
                ))
        except Exception as e:
            # Fallback to console logging if database fails
            console.warning("Logging service error: %s", e)
            if details:
                console.warning("Details: %s", details)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log user actions (login, signup, publish, etc.)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries. Returns the number of rows removed."""
        cutoff = utcnow() - timedelta(days=days_to_keep)

        with db.engine.begin() as conn:
            result = conn.execute(delete(AppLog.__table__).where(AppLog.timestamp < cutoff))

        LoggingService.info('system', f"Cleaned up {result.rowcount} old log entries")
        return result.rowcount


def db_log(level, source, message, details=None, user_id=None):
    """Shortcut used by feature modules"""
    LoggingService.log(level, source, message, details, user_id)


# Convenience instance for easy importing
logger = LoggingService()
