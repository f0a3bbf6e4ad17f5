"""
Tags Routes
===========

Public:
- GET / -- list tags (search, includePostCount, pagination)
- GET /<id>, GET /slug/<slug> -- single tag with post count
- GET /slug/<slug>/posts -- posts carrying the tag

Admin:
- POST / -- create
- PUT /<id> -- update
- DELETE /<id> -- delete, refused while any post references the tag
"""

from flask import g, jsonify, request
from sqlalchemy import func, or_

from ...core.database import db, get_page_args, paginate
from ...core.errors import APIError, validate
from ...core.logging_service import db_log
from ...core.slugs import persist_with_slug_retry, slugify, unique_slug
from ..auth.utils import admin_required
from ..posts.models import Post
from . import tags_bp
from .models import Tag
from .schemas import CreateTagRequest, UpdateTagRequest


def _ensure_name_available(name, exclude_id=None):
    query = Tag.query.filter(func.lower(Tag.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    if query.first():
        raise APIError(400, 'Tag with this name already exists')


def _get_tag_or_404(tag_id):
    tag = db.session.get(Tag, tag_id)
    if not tag:
        raise APIError(404, 'Tag not found')
    return tag


@tags_bp.route('', methods=['GET'])
def get_all_tags():
    page, limit = get_page_args(request.args, default_limit=50)
    include_post_count = request.args.get('includePostCount') == 'true'

    query = Tag.query
    search = request.args.get('search', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(Tag.name.ilike(pattern), Tag.description.ilike(pattern)))

    tags, pagination = paginate(query.order_by(Tag.name.asc()), page, limit)
    return jsonify({
        'success': True,
        'data': {
            'tags': [tag.to_dict(include_post_count=include_post_count) for tag in tags],
            'pagination': pagination,
        },
    })


@tags_bp.route('/<tag_id>', methods=['GET'])
def get_tag_by_id(tag_id):
    tag = _get_tag_or_404(tag_id)
    return jsonify({'success': True, 'data': {'tag': tag.to_dict(include_post_count=True)}})


@tags_bp.route('/slug/<slug>', methods=['GET'])
def get_tag_by_slug(slug):
    tag = Tag.query.filter_by(slug=slug).first()
    if not tag:
        raise APIError(404, 'Tag not found')
    return jsonify({'success': True, 'data': {'tag': tag.to_dict(include_post_count=True)}})


@tags_bp.route('/slug/<slug>/posts', methods=['GET'])
def get_posts_by_tag(slug):
    tag = Tag.query.filter_by(slug=slug).first()
    if not tag:
        raise APIError(404, 'Tag not found')

    page, limit = get_page_args(request.args)
    query = Post.query.filter(Post.tags.any(Tag.id == tag.id))
    # Drafts stay hidden unless explicitly requested
    query = query.filter(Post.published.is_(request.args.get('published') != 'false'))

    posts, pagination = paginate(query.order_by(Post.created_at.desc()), page, limit)
    return jsonify({
        'success': True,
        'data': {
            'tag': tag.to_dict(),
            'posts': [post.to_dict() for post in posts],
            'pagination': pagination,
        },
    })


@tags_bp.route('', methods=['POST'])
@admin_required
def create_tag():
    data = validate(CreateTagRequest, request.get_json(silent=True))
    _ensure_name_available(data.name)

    def apply_changes():
        tag = Tag(name=data.name, description=data.description, color=data.color)
        tag.slug = unique_slug(Tag, slugify(data.name))
        db.session.add(tag)
        return tag

    tag = persist_with_slug_retry(apply_changes)

    db_log('info', 'tags', f'Tag created: {tag.name}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'tag': tag.to_dict()}}), 201


@tags_bp.route('/<tag_id>', methods=['PUT'])
@admin_required
def update_tag(tag_id):
    data = validate(UpdateTagRequest, request.get_json(silent=True))
    _get_tag_or_404(tag_id)
    changes = data.changes()

    name = changes.get('name')
    if name:
        _ensure_name_available(name, exclude_id=tag_id)

    def apply_changes():
        tag = db.session.get(Tag, tag_id)
        if name and name != tag.name:
            tag.name = name
            tag.slug = unique_slug(Tag, slugify(name), exclude_id=tag.id)
        for field in ('description', 'color'):
            if field in changes:
                setattr(tag, field, changes[field])
        return tag

    tag = persist_with_slug_retry(apply_changes)

    db_log('info', 'tags', f'Tag updated: {tag.name}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'tag': tag.to_dict()}})


@tags_bp.route('/<tag_id>', methods=['DELETE'])
@admin_required
def delete_tag(tag_id):
    tag = _get_tag_or_404(tag_id)

    post_count = tag.post_count()
    if post_count > 0:
        raise APIError(
            400,
            f'Cannot delete tag "{tag.name}" as it is being used by {post_count} post(s). '
            'Please remove the tag from all posts first.',
        )

    name = tag.name
    db.session.delete(tag)
    db.session.commit()

    db_log('info', 'tags', f'Tag deleted: {name}', user_id=g.current_user.id)
    return jsonify({'success': True, 'message': 'Tag deleted successfully'})
