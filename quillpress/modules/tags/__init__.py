"""
Tags Module
===========

Tags group posts by topic. A tag cannot be removed while posts still carry it.
"""

from flask import Blueprint

tags_bp = Blueprint('tags', __name__, url_prefix='/api/tags')

from . import routes

__all__ = ['tags_bp']
