"""
Sidebar Ordering
================

Bulk reorder of documentation sections/pages within a parent. Positions
are opaque integers; the whole batch is applied or none of it is.
"""

import logging

from .database import db
from .errors import APIError

logger = logging.getLogger(__name__)


def ordered_children(model, parent_column, parent_id, *filters):
    """Children of a parent by sidebar position, ties by creation time then id"""
    return (
        model.query
        .filter(parent_column == parent_id, *filters)
        .order_by(model.sidebar_position.asc(), model.created_at.asc(), model.id.asc())
        .all()
    )


def apply_positions(model, parent_column, parent_id, items):
    """Set sidebar_position for every item in one transaction.

    Every id must belong to the parent; any stranger rejects the whole
    batch before a single row is touched. Rows are flushed one at a time,
    so a failure part-way through surfaces mid-batch and the rollback
    discards the rows already written.
    """
    ids = [item.id for item in items]
    rows = {
        row.id: row
        for row in model.query.filter(parent_column == parent_id, model.id.in_(ids)).all()
    } if ids else {}

    foreign = [item_id for item_id in ids if item_id not in rows]
    if foreign:
        raise APIError(
            400,
            'Some items do not belong to this parent',
            details=[{'field': 'items', 'message': f'Unknown id: {item_id}'} for item_id in foreign],
        )

    try:
        for item in items:
            rows[item.id].sidebar_position = item.sidebar_position
            db.session.flush()
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.error(f"Reorder of {model.__tablename__} under {parent_id} rolled back")
        raise

    return ordered_children(model, parent_column, parent_id)
