"""
Quillpress Core
===============

Core utilities and shared functionality for Quillpress modules.
"""

from .config import Config
from .database import db
from .errors import APIError
from .logging_service import LoggingService, db_log, logger

__all__ = ['Config', 'db', 'APIError', 'LoggingService', 'db_log', 'logger']
