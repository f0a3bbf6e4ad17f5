"""
Upload Routes
=============

Provides:
- POST /image -- multipart field "image"; returns the stored image URL (admin)
"""

import logging
import os

from flask import current_app, g, jsonify, request

from ...core.errors import APIError
from ...core.logging_service import db_log
from ...core.storage import StorageError, upload_file
from ..auth.utils import admin_required
from . import upload_bp

logger = logging.getLogger(__name__)

ALLOWED_MIMETYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp'}


def _max_megabytes(limit):
    return f'{limit // (1024 * 1024)}MB'


@upload_bp.route('/image', methods=['POST'])
@admin_required
def upload_image():
    image = request.files.get('image')
    if image is None or not image.filename:
        raise APIError(400, 'No file uploaded')

    if image.mimetype not in ALLOWED_MIMETYPES:
        raise APIError(400, 'Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.')

    if not os.path.splitext(image.filename)[1]:
        raise APIError(400, 'File must have a valid extension')

    content = image.read()
    limit = current_app.config['UPLOAD_MAX_BYTES']
    if len(content) > limit:
        raise APIError(400, f'File size too large. Maximum size is {_max_megabytes(limit)}.')

    try:
        image_url = upload_file(content, image.filename, image.mimetype)
    except StorageError as e:
        logger.error(f"Image upload failed: {e}")
        db_log('error', 'upload', 'Image upload failed', {'error': str(e)},
               user_id=g.current_user.id)
        return jsonify({
            'success': False,
            'error': 'Failed to upload image',
            'details': str(e),
        }), 500

    db_log('info', 'upload', f'Image uploaded: {image_url}', user_id=g.current_user.id)
    return jsonify({
        'success': True,
        'imageUrl': image_url,
        'message': 'Image uploaded successfully',
    })
