"""
Newsletter Routes
=================

Provides:
- POST /subscribe -- subscribe, or reactivate a previous subscriber
- POST /unsubscribe -- deactivate a subscriber
- GET /subscribers -- active subscribers, paginated (admin)
- GET /export -- active subscribers as an .xlsx download (admin)
"""

import logging
import math

from flask import Response, g, jsonify, request
from sqlalchemy.exc import IntegrityError

from ...core.database import db, get_page_args, utcnow
from ...core.errors import APIError, validate
from ...core.logging_service import db_log
from ..auth.utils import admin_required
from . import newsletter_bp
from .export import XLSX_MIMETYPE, build_subscribers_workbook, export_filename
from .models import NewsletterSubscriber
from .schemas import NewsletterEmailRequest

logger = logging.getLogger(__name__)

ALREADY_SUBSCRIBED = 'Email is already subscribed to our newsletter'


def _active_subscribers():
    return NewsletterSubscriber.query.filter(
        NewsletterSubscriber.is_active.is_(True)
    ).order_by(NewsletterSubscriber.subscribed_at.desc())


@newsletter_bp.route('/subscribe', methods=['POST'])
def subscribe():
    data = validate(NewsletterEmailRequest, request.get_json(silent=True))

    subscriber = NewsletterSubscriber.query.filter_by(email=data.email).first()
    if subscriber:
        if subscriber.is_active:
            raise APIError(400, ALREADY_SUBSCRIBED)

        subscriber.is_active = True
        subscriber.subscribed_at = utcnow()
        db.session.commit()

        db_log('info', 'newsletter', f'Subscriber reactivated: {data.email}')
        return jsonify({
            'success': True,
            'message': 'Successfully resubscribed to newsletter',
            'data': {'subscriber': subscriber.to_dict()},
        })

    subscriber = NewsletterSubscriber(email=data.email)
    db.session.add(subscriber)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with an identical sign-up
        db.session.rollback()
        raise APIError(400, ALREADY_SUBSCRIBED)

    db_log('info', 'newsletter', f'New subscriber: {data.email}')
    return jsonify({
        'success': True,
        'message': 'Successfully subscribed to newsletter',
        'data': {'subscriber': subscriber.to_dict()},
    }), 201


@newsletter_bp.route('/unsubscribe', methods=['POST'])
def unsubscribe():
    data = validate(NewsletterEmailRequest, request.get_json(silent=True))

    subscriber = NewsletterSubscriber.query.filter_by(email=data.email).first()
    if not subscriber:
        raise APIError(404, 'Email not found in our newsletter list')
    if not subscriber.is_active:
        raise APIError(400, 'Email is already unsubscribed')

    subscriber.is_active = False
    db.session.commit()

    db_log('info', 'newsletter', f'Unsubscribed: {data.email}')
    return jsonify({'success': True, 'message': 'Successfully unsubscribed from newsletter'})


@newsletter_bp.route('/subscribers', methods=['GET'])
@admin_required
def get_subscribers():
    page, limit = get_page_args(request.args, default_limit=50)
    query = _active_subscribers()

    total = query.count()
    subscribers = query.offset((page - 1) * limit).limit(limit).all()

    return jsonify({
        'success': True,
        'data': {
            'subscribers': [subscriber.to_dict() for subscriber in subscribers],
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'pages': math.ceil(total / limit),
            },
        },
    })


@newsletter_bp.route('/export', methods=['GET'])
@admin_required
def export_subscribers():
    subscribers = _active_subscribers().all()
    content = build_subscribers_workbook(subscribers)
    filename = export_filename(utcnow())

    db_log('info', 'newsletter', f'Exported {len(subscribers)} subscribers',
           user_id=g.current_user.id)

    return Response(
        content,
        mimetype=XLSX_MIMETYPE,
        headers={
            'Content-Disposition': f'attachment; filename="{filename}"',
            'Content-Length': str(len(content)),
        },
    )
