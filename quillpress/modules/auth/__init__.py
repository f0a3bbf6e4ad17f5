"""
Quillpress Auth Module

Provides user authentication functionality including:
- Email/password registration and login
- Bearer JWT issuance and verification
- Optional reCAPTCHA verification
- Profile updates and admin management
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

from . import routes
from .models import User
from .utils import admin_required, token_required

__all__ = ['auth_bp', 'User', 'admin_required', 'token_required']
