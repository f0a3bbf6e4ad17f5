"""
Documentation Module
====================

Product documentation organised as products -> sections -> pages. Slugs are
unique per product (sections) and per section (pages); sidebar order is an
explicit position that admins rearrange in bulk.
"""

from flask import Blueprint

documentation_bp = Blueprint('documentation', __name__, url_prefix='/api/documentation')

from . import routes

__all__ = ['documentation_bp']
