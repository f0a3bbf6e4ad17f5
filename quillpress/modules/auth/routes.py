"""
Auth Routes
===========

Provides:
- POST /register -- create an account (first account becomes admin)
- POST /login -- exchange credentials for a bearer token
- GET /me -- current user
- PUT /profile -- update avatar / bio
- GET /users -- list all users (admin)
- PATCH /users/<id>/admin -- grant or revoke admin (admin)
"""

import logging

from flask import g, jsonify, request
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ...core.database import db
from ...core.errors import APIError, validate
from ...core.logging_service import LoggingService, db_log
from . import auth_bp
from .models import User
from .recaptcha import verify_recaptcha
from .schemas import LoginRequest, RegisterRequest, UpdateProfileRequest
from .utils import admin_required, generate_token, get_client_ip, token_required

logger = logging.getLogger(__name__)


def _check_captcha(token):
    if token and not verify_recaptcha(token, get_client_ip()):
        raise APIError(400, 'CAPTCHA verification failed. Please try again.', code='CAPTCHA_FAILED')


@auth_bp.route('/register', methods=['POST'])
def register():
    data = validate(RegisterRequest, request.get_json(silent=True))
    _check_captcha(data.recaptcha_token)

    existing = User.query.filter(
        or_(User.email == data.email, User.username == data.username)
    ).first()
    if existing:
        field = 'email' if existing.email == data.email else 'username'
        raise APIError(400, f'User with this {field} already exists')

    # First user becomes admin
    is_first_user = User.query.count() == 0

    user = User(
        email=data.email,
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        is_admin=is_first_user,
    )
    user.set_password(data.password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise APIError(400, 'User with this email or username already exists')

    LoggingService.log_user_action('auth', 'signup', user_id=user.id,
                                   details={'username': user.username, 'is_admin': user.is_admin})

    return jsonify({
        'success': True,
        'data': {'user': user.to_dict(), 'token': generate_token(user)},
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = validate(LoginRequest, request.get_json(silent=True))
    _check_captcha(data.recaptcha_token)

    user = User.query.filter_by(email=data.email).first()
    if not user or not user.check_password(data.password):
        logger.info(f"Failed login for {data.email}")
        raise APIError(401, 'Invalid credentials')

    LoggingService.log_user_action('auth', 'login', user_id=user.id)

    return jsonify({
        'success': True,
        'data': {'user': user.to_dict(), 'token': generate_token(user)},
    })


@auth_bp.route('/me', methods=['GET'])
@token_required
def me():
    return jsonify({'success': True, 'data': {'user': g.current_user.to_dict()}})


@auth_bp.route('/profile', methods=['PUT'])
@token_required
def update_profile():
    data = validate(UpdateProfileRequest, request.get_json(silent=True))
    user = g.current_user

    for field, value in data.changes().items():
        setattr(user, field, value or None)
    db.session.commit()

    return jsonify({'success': True, 'data': {'user': user.to_dict()}})


@auth_bp.route('/users', methods=['GET'])
@admin_required
def get_all_users():
    users = User.query.order_by(User.created_at.desc()).all()
    return jsonify({'success': True, 'data': {'users': [u.to_dict() for u in users]}})


@auth_bp.route('/users/<user_id>/admin', methods=['PATCH'])
@admin_required
def update_user_admin_status(user_id):
    data = request.get_json(silent=True) or {}
    is_admin = data.get('isAdmin')

    if not isinstance(is_admin, bool):
        raise APIError(400, 'isAdmin must be a boolean value')

    if user_id == g.current_user.id and not is_admin:
        raise APIError(400, 'Cannot remove admin status from yourself')

    target = db.session.get(User, user_id)
    if not target:
        raise APIError(404, 'User not found')

    target.is_admin = is_admin
    db.session.commit()

    db_log('info', 'auth', f"Admin status for {target.username} set to {is_admin}",
           user_id=g.current_user.id)

    return jsonify({'success': True, 'data': {'user': target.to_dict()}})
