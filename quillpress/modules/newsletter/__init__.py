"""
Newsletter Module
=================

Email newsletter sign-ups. Unsubscribing deactivates the row rather than
deleting it, so a returning reader is reactivated in place.
"""

from flask import Blueprint

newsletter_bp = Blueprint('newsletter', __name__, url_prefix='/api/newsletter')

from . import routes

__all__ = ['newsletter_bp']
