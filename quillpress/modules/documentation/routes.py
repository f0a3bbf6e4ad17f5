"""
Documentation Routes
====================

Products:
- GET /products, GET /products/<slug>
- POST /products, PUT /products/<id>, DELETE /products/<id> (admin)

Sections:
- GET /products/<product_id>/sections
- POST /products/<product_id>/sections (admin)
- PUT|DELETE /products/<product_id>/sections/<section_id> (admin)
- POST /products/<product_id>/sections/reorder (admin)

Pages:
- GET /sections/<section_id>/pages, GET /sections/<section_id>/pages/<slug>
- POST /sections/<section_id>/pages (admin)
- PUT|DELETE /sections/<section_id>/pages/<page_id> (admin)
- POST /sections/<section_id>/pages/reorder (admin)
"""

import logging

from flask import g, jsonify, request
from sqlalchemy import func

from ...core.database import db
from ...core.errors import APIError, validate
from ...core.logging_service import db_log
from ...core.ordering import apply_positions, ordered_children
from ...core.slugs import persist_with_slug_retry, slugify, unique_slug
from ..auth.utils import admin_required
from . import documentation_bp
from .models import DocumentationPage, DocumentationProduct, DocumentationSection
from .schemas import (
    CreatePageRequest,
    CreateProductRequest,
    CreateSectionRequest,
    ReorderRequest,
    UpdatePageRequest,
    UpdateProductRequest,
    UpdateSectionRequest,
)

logger = logging.getLogger(__name__)


def _published_only():
    return request.args.get('published') == 'true'


def _next_position(model, *filters):
    """One past the highest sibling position, 0 for the first child"""
    highest = db.session.query(func.max(model.sidebar_position)).filter(*filters).scalar()
    return 0 if highest is None else highest + 1


def _apply_fields(instance, changes, fields):
    for field in fields:
        if field in changes and changes[field] is not None:
            setattr(instance, field, changes[field])


def _get_product_or_404(product_id):
    product = db.session.get(DocumentationProduct, product_id)
    if not product:
        raise APIError(404, 'Product not found')
    return product


def _get_section_or_404(section_id):
    section = db.session.get(DocumentationSection, section_id)
    if not section:
        raise APIError(404, 'Section not found')
    return section


def _get_product_section(product_id, section_id):
    section = DocumentationSection.query.filter_by(id=section_id, product_id=product_id).first()
    if not section:
        raise APIError(404, 'Section not found in this product')
    return section


def _get_section_page(section_id, page_id):
    page = DocumentationPage.query.filter_by(id=page_id, section_id=section_id).first()
    if not page:
        raise APIError(404, 'Page not found in this section')
    return page


def _claim_product_slug(slug, exclude_id=None):
    query = DocumentationProduct.query.filter(DocumentationProduct.slug == slug)
    if exclude_id is not None:
        query = query.filter(DocumentationProduct.id != exclude_id)
    if db.session.query(query.exists()).scalar():
        raise APIError(400, 'A product with this slug already exists')
    return slug


# ===================
# PRODUCTS
# ===================

@documentation_bp.route('/products', methods=['GET'])
def get_all_products():
    published_only = _published_only()
    query = DocumentationProduct.query
    if published_only:
        query = query.filter(DocumentationProduct.published.is_(True))

    products = query.order_by(
        DocumentationProduct.sidebar_position.asc(),
        DocumentationProduct.created_at.asc(),
        DocumentationProduct.id.asc(),
    ).all()

    return jsonify({
        'success': True,
        'data': {'products': [product.to_dict(published_only=published_only) for product in products]},
    })


@documentation_bp.route('/products/<slug>', methods=['GET'])
def get_product_by_slug(slug):
    product = DocumentationProduct.query.filter_by(slug=slug).first()
    if not product:
        raise APIError(404, 'Product not found')
    return jsonify({'success': True, 'data': {'product': product.to_dict()}})


@documentation_bp.route('/products', methods=['POST'])
@admin_required
def create_product():
    data = validate(CreateProductRequest, request.get_json(silent=True))
    explicit_slug = slugify(data.slug) if data.slug else None

    def apply_changes():
        product = DocumentationProduct(
            name=data.name,
            description=data.description,
            published=data.published,
        )
        if explicit_slug:
            product.slug = _claim_product_slug(explicit_slug)
        else:
            product.slug = unique_slug(DocumentationProduct, slugify(data.name))
        if data.sidebar_position is not None:
            product.sidebar_position = data.sidebar_position
        else:
            product.sidebar_position = _next_position(DocumentationProduct)
        db.session.add(product)
        return product

    product = persist_with_slug_retry(apply_changes)

    db_log('info', 'documentation', f'Product created: {product.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'product': product.to_dict()}}), 201


@documentation_bp.route('/products/<product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    data = validate(UpdateProductRequest, request.get_json(silent=True))
    _get_product_or_404(product_id)
    changes = data.changes()
    explicit_slug = slugify(changes['slug']) if changes.get('slug') else None

    def apply_changes():
        product = db.session.get(DocumentationProduct, product_id)
        # Renaming keeps the published URL; only an explicit slug moves it
        if explicit_slug and explicit_slug != product.slug:
            product.slug = _claim_product_slug(explicit_slug, exclude_id=product.id)
        _apply_fields(product, changes, ('name', 'published', 'sidebar_position'))
        if 'description' in changes:
            product.description = changes['description']
        return product

    product = persist_with_slug_retry(apply_changes)

    db_log('info', 'documentation', f'Product updated: {product.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'product': product.to_dict()}})


@documentation_bp.route('/products/<product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    product = _get_product_or_404(product_id)
    slug = product.slug

    db.session.delete(product)
    db.session.commit()

    db_log('info', 'documentation', f'Product deleted: {slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'message': 'Product deleted successfully'})


# ===================
# SECTIONS
# ===================

@documentation_bp.route('/products/<product_id>/sections', methods=['GET'])
def get_sections_by_product(product_id):
    published_only = _published_only()
    filters = [DocumentationSection.published.is_(True)] if published_only else []
    sections = ordered_children(DocumentationSection, DocumentationSection.product_id,
                                product_id, *filters)
    return jsonify({
        'success': True,
        'data': {'sections': [section.to_dict(published_only=published_only) for section in sections]},
    })


@documentation_bp.route('/products/<product_id>/sections', methods=['POST'])
@admin_required
def create_section(product_id):
    data = validate(CreateSectionRequest, request.get_json(silent=True))
    _get_product_or_404(product_id)
    base_slug = slugify(data.slug or data.title)
    in_product = DocumentationSection.product_id == product_id

    def apply_changes():
        section = DocumentationSection(
            title=data.title,
            description=data.description,
            published=data.published,
            product_id=product_id,
        )
        section.slug = unique_slug(DocumentationSection, base_slug, scope=[in_product])
        if data.sidebar_position is not None:
            section.sidebar_position = data.sidebar_position
        else:
            section.sidebar_position = _next_position(DocumentationSection, in_product)
        db.session.add(section)
        return section

    section = persist_with_slug_retry(apply_changes)

    db_log('info', 'documentation', f'Section created: {section.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'section': section.to_dict()}}), 201


@documentation_bp.route('/products/<product_id>/sections/<section_id>', methods=['PUT'])
@admin_required
def update_section(product_id, section_id):
    data = validate(UpdateSectionRequest, request.get_json(silent=True))
    _get_product_section(product_id, section_id)
    changes = data.changes()
    in_product = DocumentationSection.product_id == product_id

    def apply_changes():
        section = db.session.get(DocumentationSection, section_id)
        title = changes.get('title')
        if changes.get('slug') or (title and title != section.title):
            base_slug = slugify(changes.get('slug') or title)
            if base_slug != section.slug:
                section.slug = unique_slug(DocumentationSection, base_slug,
                                           scope=[in_product], exclude_id=section.id)
        _apply_fields(section, changes, ('title', 'published', 'sidebar_position'))
        if 'description' in changes:
            section.description = changes['description']
        return section

    section = persist_with_slug_retry(apply_changes)

    db_log('info', 'documentation', f'Section updated: {section.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'section': section.to_dict()}})


@documentation_bp.route('/products/<product_id>/sections/<section_id>', methods=['DELETE'])
@admin_required
def delete_section(product_id, section_id):
    section = _get_product_section(product_id, section_id)
    slug = section.slug

    db.session.delete(section)
    db.session.commit()

    db_log('info', 'documentation', f'Section deleted: {slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'message': 'Section deleted successfully'})


@documentation_bp.route('/products/<product_id>/sections/reorder', methods=['POST'])
@admin_required
def reorder_sections(product_id):
    data = validate(ReorderRequest, request.get_json(silent=True))
    _get_product_or_404(product_id)

    sections = apply_positions(DocumentationSection, DocumentationSection.product_id,
                               product_id, data.items)

    db_log('info', 'documentation', f'Reordered {len(data.items)} sections in product {product_id}',
           user_id=g.current_user.id)
    return jsonify({
        'success': True,
        'data': {'sections': [section.to_dict(include_pages=False) for section in sections]},
        'message': 'Sections reordered successfully',
    })


# ===================
# PAGES
# ===================

@documentation_bp.route('/sections/<section_id>/pages', methods=['GET'])
def get_pages_by_section(section_id):
    filters = [DocumentationPage.published.is_(True)] if _published_only() else []
    pages = ordered_children(DocumentationPage, DocumentationPage.section_id, section_id, *filters)
    return jsonify({'success': True, 'data': {'pages': [page.to_dict() for page in pages]}})


@documentation_bp.route('/sections/<section_id>/pages/<slug>', methods=['GET'])
def get_page_by_slug(section_id, slug):
    page = DocumentationPage.query.filter_by(section_id=section_id, slug=slug).first()
    if not page:
        raise APIError(404, 'Page not found')
    return jsonify({'success': True, 'data': {'page': page.to_dict(include_section=True)}})


@documentation_bp.route('/sections/<section_id>/pages', methods=['POST'])
@admin_required
def create_page(section_id):
    data = validate(CreatePageRequest, request.get_json(silent=True))
    _get_section_or_404(section_id)
    base_slug = slugify(data.slug or data.title)
    in_section = DocumentationPage.section_id == section_id

    def apply_changes():
        page = DocumentationPage(
            title=data.title,
            content=data.content,
            excerpt=data.excerpt,
            published=data.published,
            section_id=section_id,
        )
        page.slug = unique_slug(DocumentationPage, base_slug, scope=[in_section])
        if data.sidebar_position is not None:
            page.sidebar_position = data.sidebar_position
        else:
            page.sidebar_position = _next_position(DocumentationPage, in_section)
        db.session.add(page)
        return page

    page = persist_with_slug_retry(apply_changes)

    db_log('info', 'documentation', f'Page created: {page.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'page': page.to_dict()}}), 201


@documentation_bp.route('/sections/<section_id>/pages/<page_id>', methods=['PUT'])
@admin_required
def update_page(section_id, page_id):
    data = validate(UpdatePageRequest, request.get_json(silent=True))
    _get_section_page(section_id, page_id)
    changes = data.changes()
    in_section = DocumentationPage.section_id == section_id

    def apply_changes():
        page = db.session.get(DocumentationPage, page_id)
        title = changes.get('title')
        if changes.get('slug') or (title and title != page.title):
            base_slug = slugify(changes.get('slug') or title)
            if base_slug != page.slug:
                page.slug = unique_slug(DocumentationPage, base_slug,
                                        scope=[in_section], exclude_id=page.id)
        _apply_fields(page, changes, ('title', 'content', 'published', 'sidebar_position'))
        if 'excerpt' in changes:
            page.excerpt = changes['excerpt']
        return page

    page = persist_with_slug_retry(apply_changes)

    db_log('info', 'documentation', f'Page updated: {page.slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'data': {'page': page.to_dict()}})


@documentation_bp.route('/sections/<section_id>/pages/<page_id>', methods=['DELETE'])
@admin_required
def delete_page(section_id, page_id):
    page = _get_section_page(section_id, page_id)
    slug = page.slug

    db.session.delete(page)
    db.session.commit()

    db_log('info', 'documentation', f'Page deleted: {slug}', user_id=g.current_user.id)
    return jsonify({'success': True, 'message': 'Page deleted successfully'})


@documentation_bp.route('/sections/<section_id>/pages/reorder', methods=['POST'])
@admin_required
def reorder_pages(section_id):
    data = validate(ReorderRequest, request.get_json(silent=True))
    _get_section_or_404(section_id)

    pages = apply_positions(DocumentationPage, DocumentationPage.section_id, section_id, data.items)

    db_log('info', 'documentation', f'Reordered {len(data.items)} pages in section {section_id}',
           user_id=g.current_user.id)
    return jsonify({
        'success': True,
        'data': {'pages': [page.to_dict() for page in pages]},
        'message': 'Pages reordered successfully',
    })
