"""
Slug Utilities
==============

Derive URL-safe slugs and keep them unique within a scope:
global for posts, tags and products, per parent for documentation
sections and pages.
"""

import logging
import re

from flask import current_app
from sqlalchemy.exc import IntegrityError

from .database import db
from .errors import APIError

logger = logging.getLogger(__name__)


def slugify(text):
    """Create a URL-friendly slug: lowercase, [a-z0-9-] only, single hyphens"""
    slug = re.sub(r'[^a-z0-9\s-]', '', (text or '').lower())
    slug = re.sub(r'\s+', '-', slug.strip())
    slug = re.sub(r'-+', '-', slug)
    slug = slug.strip('-')
    return slug or 'untitled'


def unique_slug(model, base_slug, scope=(), exclude_id=None):
    """Return the first of base, base-1, base-2, ... free within the scope.

    Args:
        model: mapped class with a `slug` column
        base_slug: already slugified candidate
        scope: extra filter expressions restricting the sibling set
        exclude_id: id of the row being renamed, so it never collides with itself
    """
    slug = base_slug
    counter = 1

    with db.session.no_autoflush:
        while True:
            query = model.query.filter(model.slug == slug, *scope)
            if exclude_id is not None:
                query = query.filter(model.id != exclude_id)
            if not db.session.query(query.exists()).scalar():
                return slug

            slug = f"{base_slug}-{counter}"
            counter += 1


def persist_with_slug_retry(apply_changes, attempts=None):
    """Commit a create/rename, retrying when the slug was taken concurrently.

    `apply_changes` must (re)apply the whole mutation to the session,
    resolve the slug, and return the instance. The check-then-insert in
    unique_slug() is not atomic, so the unique constraint is the backstop:
    on IntegrityError the session is rolled back and the mutation replayed
    against fresh state.
    """
    if attempts is None:
        attempts = current_app.config.get('SLUG_RETRY_ATTEMPTS', 3)

    for attempt in range(1, attempts + 1):
        instance = apply_changes()
        try:
            db.session.commit()
            return instance
        except IntegrityError as e:
            db.session.rollback()
            logger.warning(f"Slug conflict on attempt {attempt}/{attempts}: {e.orig}")

    raise APIError(400, 'Could not allocate a unique slug, please try again')
