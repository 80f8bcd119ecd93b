from flask import Blueprint, request, jsonify
from flask_login import login_required
from marketplace.extensions import db
from marketplace.middleware import role_required
from marketplace.models import (
    Category,
    CategoryStatus,
    Product,
    ProductStatus,
)
from marketplace.serializers import category_to_dict, product_to_dict
from marketplace.services.catalog_service import (
    CategoryTreeError,
    add_category,
    move_category,
    normalize_parent_ids,
    remove_category_permanently,
    resolve_active_categories,
)
from marketplace.utils import (
    json_error,
    LIKE_ESCAPE,
    like_pattern,
    page_args,
    page_envelope,
    paginate_query,
    slugify,
)
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('categories', __name__)

CATEGORIES_PER_PAGE = 50


def _active_category_or_404(category_id):
    category = Category.query.filter_by(
        id=category_id, status=CategoryStatus.ACTIVE).first()
    if category is None:
        return None, json_error('Category not found', 404)
    return category, None


def _with_relatives(category, parents=False, children=False):
    data = category_to_dict(category)
    if parents and category.parent_category_id:
        data['parent_categories'] = [
            category_to_dict(c) if c else None
            for c in resolve_active_categories(category.parent_category_id)
        ]
    if children and category.child_categories:
        data['child_categories'] = [
            category_to_dict(c) if c else None
            for c in resolve_active_categories(category.child_categories)
        ]
    return data


def _slug_taken(slug, exclude_id=None):
    query = Category.query.filter_by(slug=slug)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


@bp.route('/api/categories', methods=['GET'])
def list_categories():
    page, limit = page_args(default_limit=CATEGORIES_PER_PAGE)
    parent_id = (request.args.get('parent') or '').strip()
    search = (request.args.get('search') or '').strip()

    query = Category.query.filter_by(status=CategoryStatus.ACTIVE)
    if parent_id:
        parent = db.session.get(Category, parent_id)
        child_ids = list(parent.child_categories or []) if parent else []
        query = query.filter(Category.id.in_(child_ids))
    if search:
        query = query.filter(Category.name.ilike(
            like_pattern(search), escape=LIKE_ESCAPE))
    query = query.order_by(Category.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    return jsonify(page_envelope(
        result, 'data', [category_to_dict(c) for c in result['items']]))


@bp.route('/api/categories/parent-cats', methods=['GET'])
def list_parent_categories():
    page, limit = page_args(default_limit=CATEGORIES_PER_PAGE)
    search = (request.args.get('search') or '').strip()

    # JSON null and an empty list both mean top level.
    query = Category.query.filter_by(status=CategoryStatus.ACTIVE)
    if search:
        query = query.filter(Category.name.ilike(
            like_pattern(search), escape=LIKE_ESCAPE))
    roots = [
        c for c in query.order_by(Category.created_at.desc()).all()
        if not c.parent_category_id
    ]

    total = len(roots)
    start = (page - 1) * limit
    return jsonify({
        'success': True,
        'data': [category_to_dict(c) for c in roots[start:start + limit]],
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': -(-total // limit),
    })


@bp.route('/api/categories/<category_id>', methods=['GET'])
def get_category(category_id):
    # Soft-deleted categories stay retrievable by id.
    category = db.session.get(Category, category_id)
    if category is None:
        return json_error('Category not found', 404)
    return jsonify({'success': True, 'data': category_to_dict(category)})


@bp.route('/api/categories/<category_id>/with-parent-cats', methods=['GET'])
def get_category_with_parents(category_id):
    category, error = _active_category_or_404(category_id)
    if error:
        return error
    return jsonify({
        'success': True,
        'data': _with_relatives(category, parents=True),
    })


@bp.route('/api/categories/<category_id>/with-child-cats', methods=['GET'])
def get_category_with_children(category_id):
    category, error = _active_category_or_404(category_id)
    if error:
        return error
    return jsonify({
        'success': True,
        'data': _with_relatives(category, children=True),
    })


@bp.route('/api/categories/<category_id>/with-parent-child-cats',
          methods=['GET'])
def get_category_with_parents_and_children(category_id):
    category, error = _active_category_or_404(category_id)
    if error:
        return error
    return jsonify({
        'success': True,
        'data': _with_relatives(category, parents=True, children=True),
    })


@bp.route('/api/categories/<category_id>/products', methods=['GET'])
def list_category_products(category_id):
    category, error = _active_category_or_404(category_id)
    if error:
        return error

    page, limit = page_args(default_limit=CATEGORIES_PER_PAGE)
    category_ids = [category.id] + list(category.child_categories or [])
    query = Product.query.filter(
        Product.category_id.in_(category_ids),
        Product.status == ProductStatus.ACTIVE,
    ).order_by(Product.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    return jsonify(page_envelope(
        result, 'products', [product_to_dict(p) for p in result['items']]))


@bp.route('/api/categories', methods=['POST'])
@login_required
@role_required('admin')
def create_category():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return json_error('name is required', 400)

    slug = slugify(name)
    if not slug:
        return json_error('name must contain letters or digits', 400)
    if _slug_taken(slug):
        return json_error('Slug already exists', 400)

    try:
        ancestors = normalize_parent_ids(data.get('parentCategoryId'))
        category = add_category(Category(
            name=name,
            slug=slug,
            parent_category_id=ancestors or None,
            child_categories=[],
            description=data.get('description'),
            icon=data.get('icon'),
            image=data.get('image'),
            status=CategoryStatus.ACTIVE,
        ))
    except CategoryTreeError as e:
        db.session.rollback()
        return json_error(str(e), 400)

    # Child row and parent's child list land in one commit.
    db.session.commit()
    return jsonify({'success': True, 'data': category_to_dict(category)}), 201


@bp.route('/api/categories/<category_id>', methods=['PATCH'])
@login_required
@role_required('admin')
def update_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        return json_error('Category not found', 404)

    data = request.get_json(silent=True) or {}
    allowed = ('name', 'parentCategoryId', 'description', 'icon', 'image',
               'status')
    if not any(k in data for k in allowed):
        return json_error('No valid fields to update', 400)

    if 'name' in data:
        name = (data.get('name') or '').strip()
        slug = slugify(name)
        if not slug:
            return json_error('name must contain letters or digits', 400)
        if _slug_taken(slug, exclude_id=category.id):
            return json_error('Slug already exists', 400)
        category.name = name
        category.slug = slug

    if 'status' in data:
        try:
            category.status = CategoryStatus(data['status'])
        except ValueError:
            return json_error('Invalid status', 400)

    for field in ('description', 'icon', 'image'):
        if field in data:
            setattr(category, field, data[field])

    if 'parentCategoryId' in data:
        try:
            move_category(
                category, normalize_parent_ids(data['parentCategoryId']))
        except CategoryTreeError as e:
            db.session.rollback()
            return json_error(str(e), 400)

    db.session.commit()
    return jsonify({'success': True, 'data': category_to_dict(category)})


@bp.route('/api/categories/<category_id>', methods=['DELETE'])
@login_required
@role_required('admin')
def delete_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        return json_error('Category not found', 404)

    if request.args.get('permanent', '').lower() in ('1', 'true', 'yes'):
        try:
            remove_category_permanently(category)
        except CategoryTreeError as e:
            db.session.rollback()
            return json_error(str(e), 400)
        db.session.commit()
        return jsonify({'success': True, 'message': 'Category removed'})

    category.status = CategoryStatus.DELETED
    db.session.commit()
    return jsonify({'success': True, 'message': 'Category deleted'})
