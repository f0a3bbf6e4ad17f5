"""
Posts Module
============

Blog posts with slugs, draft/publish workflow and tag associations.
Reads are public; writes are limited to admins, and to the post's author
for updates and deletes.
"""

from flask import Blueprint

posts_bp = Blueprint('posts', __name__, url_prefix='/api/posts')

from . import routes

__all__ = ['posts_bp']
