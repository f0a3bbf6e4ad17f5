import math
import os
import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Predictable constraint names keep IntegrityError messages and migrations readable
convention = {
    "ix": 'ix_%(column_0_label)s',
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

db = SQLAlchemy(metadata=MetaData(naming_convention=convention))


def generate_id():
    """Opaque string primary key"""
    return uuid.uuid4().hex


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    """Serialise a naive UTC datetime the way the API returns timestamps"""
    if value is None:
        return None
    return value.isoformat(timespec='milliseconds') + 'Z'


def parse_iso_datetime(value):
    """Parse an ISO-8601 string into a naive UTC datetime"""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def init_database(app):
    """Bind the shared SQLAlchemy handle to the app.

    Creates the directory for SQLite file databases so a fresh checkout
    can boot without manual setup.
    """
    uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if uri.startswith('sqlite:///') and uri != 'sqlite:///:memory:':
        db_dir = os.path.dirname(uri[len('sqlite:///'):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    db.init_app(app)


def get_page_args(args, default_limit=10):
    """Read page/limit query parameters, falling back to defaults on junk input"""
    try:
        page = int(args.get('page', 1))
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(args.get('limit', default_limit))
    except (TypeError, ValueError):
        limit = default_limit
    return max(page, 1), max(limit, 1)


def paginate(query, page, limit):
    """Run a paginated query.

    Returns (items, pagination) where pagination carries the totals the
    frontend uses to draw its pager.
    """
    total_count = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    total_pages = math.ceil(total_count / limit)

    return items, {
        'page': page,
        'limit': limit,
        'totalCount': total_count,
        'totalPages': total_pages,
        'hasNextPage': page < total_pages,
        'hasPrevPage': page > 1,
    }
