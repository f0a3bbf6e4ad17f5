from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from ...core.database import db
from ...core.errors import APIError
from .models import User


def generate_token(user):
    """Issue a bearer token for the user"""
    config = current_app.config
    payload = {
        'userId': user.id,
        'email': user.email,
        'exp': datetime.now(timezone.utc) + timedelta(days=config['JWT_EXPIRES_DAYS']),
    }
    return jwt.encode(payload, config['JWT_SECRET'], algorithm=config['JWT_ALGORITHM'])


def decode_token(token):
    config = current_app.config
    return jwt.decode(token, config['JWT_SECRET'], algorithms=[config['JWT_ALGORITHM']])


def load_current_user():
    """Resolve the bearer token on the current request to a User.

    Raises APIError(401) for a missing header, a bad or expired token,
    or a token whose user no longer exists.
    """
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        raise APIError(401, 'Access token required')

    try:
        payload = decode_token(auth_header[len('Bearer '):])
    except jwt.InvalidTokenError:
        raise APIError(401, 'Invalid token')

    user = db.session.get(User, payload.get('userId'))
    if not user:
        raise APIError(401, 'User not found')
    return user


def token_required(f):
    """Decorator to require a valid bearer token; sets g.current_user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = load_current_user()
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require an authenticated admin"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = load_current_user()
        if not g.current_user.is_admin:
            raise APIError(403, 'Access denied. Admin privileges required.')
        return f(*args, **kwargs)
    return decorated_function


def get_client_ip():
    """Get client IP address from request"""
    if request.headers.get('X-Forwarded-For'):
        return request.headers.get('X-Forwarded-For').split(',')[0].strip()
    elif request.headers.get('X-Real-IP'):
        return request.headers.get('X-Real-IP')
    else:
        return request.remote_addr
