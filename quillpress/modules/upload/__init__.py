"""
Upload Module
=============

Image uploads for post covers and inline content, stored through
quillpress.core.storage.
"""

from flask import Blueprint

upload_bp = Blueprint('upload', __name__, url_prefix='/api/upload')

from . import routes

__all__ = ['upload_bp']
