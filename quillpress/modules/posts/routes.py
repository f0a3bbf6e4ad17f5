"""
Posts Routes
============

Public reads:
- GET / -- paginated list (search, author, tags, published filters)
- GET /<id>, GET /slug/<slug> -- single post

Admin (author only for update/delete):
- GET /my -- the caller's posts
- POST / -- create
- PUT /<id> -- update, regenerating the slug when the title changes
- DELETE /<id> -- delete
"""

import logging

from flask import g, jsonify, request
from sqlalchemy import or_

from ...core.database import db, get_page_args, paginate, parse_iso_datetime, utcnow
from ...core.errors import APIError, validate
from ...core.logging_service import db_log
from ...core.slugs import persist_with_slug_retry, slugify, unique_slug
from ..auth.models import User
from ..auth.utils import admin_required
from ..tags.models import Tag
from . import posts_bp
from .models import Post
from .schemas import CreatePostRequest, UpdatePostRequest

logger = logging.getLogger(__name__)


def _resolve_tags(tag_ids):
    """Load tags by id, rejecting the request if any id is unknown"""
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return []

    tags = Tag.query.filter(Tag.id.in_(unique_ids)).all()
    found = {tag.id for tag in tags}
    missing = [tag_id for tag_id in unique_ids if tag_id not in found]
    if missing:
        raise APIError(400, f"Unknown tag id(s): {', '.join(missing)}")
    return tags


def _get_owned_post(post_id, action):
    post = db.session.get(Post, post_id)
    if not post:
        raise APIError(404, 'Post not found')
    if post.author_id != g.current_user.id:
        raise APIError(403, f'Not authorized to {action} this post')
    return post


def _post_list_response(query, default_limit=10):
    page, limit = get_page_args(request.args, default_limit)
    posts, pagination = paginate(query.order_by(Post.created_at.desc()), page, limit)
    return jsonify({
        'success': True,
        'data': {
            'posts': [post.to_dict() for post in posts],
            'pagination': pagination,
        },
    })


def filter_posts(query, args):
    """Apply the list filters shared by the public listing"""
    search = args.get('search', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(
            Post.title.ilike(pattern),
            Post.content.ilike(pattern),
            Post.excerpt.ilike(pattern),
        ))

    author = args.get('author', '').strip()
    if author:
        pattern = f'%{author}%'
        query = query.filter(Post.author.has(or_(
            User.username.ilike(pattern),
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
        )))

    published = args.get('published')
    if published in ('true', 'false'):
        query = query.filter(Post.published.is_(published == 'true'))

    tags = args.get('tags', '')
    tag_slugs = [slug.strip() for slug in tags.split(',') if slug.strip()]
    if tag_slugs:
        query = query.filter(Post.tags.any(Tag.slug.in_(tag_slugs)))

    return query


@posts_bp.route('', methods=['GET'])
def get_all_posts():
    return _post_list_response(filter_posts(Post.query, request.args))


@posts_bp.route('/my', methods=['GET'])
@admin_required
def get_my_posts():
    return _post_list_response(Post.query.filter(Post.author_id == g.current_user.id))


@posts_bp.route('/<post_id>', methods=['GET'])
def get_post_by_id(post_id):
    post = db.session.get(Post, post_id)
    if not post:
        raise APIError(404, 'Post not found')
    return jsonify({'success': True, 'data': {'post': post.to_dict(include_author_bio=True)}})


@posts_bp.route('/slug/<slug>', methods=['GET'])
def get_post_by_slug(slug):
    post = Post.query.filter_by(slug=slug).first()
    if not post:
        raise APIError(404, 'Post not found')
    return jsonify({'success': True, 'data': {'post': post.to_dict(include_author_bio=True)}})


@posts_bp.route('', methods=['POST'])
@admin_required
def create_post():
    data = validate(CreatePostRequest, request.get_json(silent=True))
    tag_ids = data.tag_ids or []
    author_id = g.current_user.id

    def apply_changes():
        post = Post(
            title=data.title,
            content=data.content,
            excerpt=data.excerpt,
            cover_image=data.cover_image,
            published=data.published,
            published_at=utcnow() if data.published else None,
            author_id=author_id,
        )
        if data.created_at:
            post.created_at = parse_iso_datetime(data.created_at)
        post.slug = unique_slug(Post, slugify(data.title))
        post.tags = _resolve_tags(tag_ids)
        db.session.add(post)
        return post

    post = persist_with_slug_retry(apply_changes)

    db_log('info', 'posts', f'Post created: {post.slug}', user_id=author_id)
    return jsonify({'success': True, 'data': {'post': post.to_dict()}}), 201


@posts_bp.route('/<post_id>', methods=['PUT'])
@admin_required
def update_post(post_id):
    data = validate(UpdatePostRequest, request.get_json(silent=True))
    _get_owned_post(post_id, 'update')
    changes = data.changes()

    def apply_changes():
        post = db.session.get(Post, post_id)

        title = changes.get('title')
        if title and title != post.title:
            post.slug = unique_slug(Post, slugify(title), exclude_id=post.id)

        for field in ('title', 'content'):
            if changes.get(field):
                setattr(post, field, changes[field])
        for field in ('excerpt', 'cover_image'):
            if field in changes:
                setattr(post, field, changes[field])

        if changes.get('created_at'):
            post.created_at = parse_iso_datetime(changes['created_at'])

        # publishedAt follows the first publish and is cleared on unpublish
        published = changes.get('published')
        if published is True and not post.published:
            post.published_at = utcnow()
        elif published is False:
            post.published_at = None
        if published is not None:
            post.published = published

        if changes.get('tag_ids') is not None:
            post.tags = _resolve_tags(changes['tag_ids'])

        return post

    post = persist_with_slug_retry(apply_changes)

    db_log('info', 'posts', f'Post updated: {post.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'post': post.to_dict()}})


@posts_bp.route('/<post_id>', methods=['DELETE'])
@admin_required
def delete_post(post_id):
    post = _get_owned_post(post_id, 'delete')
    slug = post.slug

    db.session.delete(post)
    db.session.commit()

    db_log('info', 'posts', f'Post deleted: {slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'message': 'Post deleted successfully'})
