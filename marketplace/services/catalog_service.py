from marketplace.extensions import db
from marketplace.models import (
    BusinessProfile,
    Category,
    CategoryStatus,
    Product,
    ProductStatus,
)
from marketplace.utils import (
    LIKE_ESCAPE,
    escape_like,
    like_pattern,
    paginate_query,
)
from sqlalchemy import String, cast, or_
from sqlalchemy.orm import contains_eager
import json
import logging

logger = logging.getLogger(__name__)


class CategoryTreeError(ValueError):
    pass


PRODUCT_SORTS = {
    'newest': Product.created_at.desc(),
    'price_asc': Product.price.asc(),
    'price_desc': Product.price.desc(),
    'popular': Product.views_count.desc(),
}


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def search_products(filters=None, sort_by='newest', page=1, per_page=12):
    filters = filters or {}
    query = Product.query.outerjoin(
        BusinessProfile, Product.product_owner_id == BusinessProfile.id
    ).options(
        contains_eager(Product.vendor)
    ).filter(Product.status == ProductStatus.ACTIVE)

    if filters.get('category'):
        query = query.filter(Product.category_id == filters['category'])

    if filters.get('tag'):
        # Matches the element as serialized, non-ASCII escapes included.
        element = escape_like(json.dumps(filters['tag']))
        query = query.filter(cast(Product.tags, String).like(
            f'%{element}%', escape=LIKE_ESCAPE))

    min_price = _to_float(filters.get('minPrice'))
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    max_price = _to_float(filters.get('maxPrice'))
    if max_price is not None:
        query = query.filter(Product.price <= max_price)

    if filters.get('vendorLocation'):
        query = query.filter(Product.vendor_location.ilike(
            like_pattern(filters['vendorLocation']), escape=LIKE_ESCAPE))

    if filters.get('q'):
        pattern = like_pattern(filters['q'])
        query = query.filter(or_(
            Product.name.ilike(pattern, escape=LIKE_ESCAPE),
            Product.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    order = PRODUCT_SORTS.get(sort_by, PRODUCT_SORTS['newest'])
    query = query.order_by(order, Product.id)

    return paginate_query(query, page=page, per_page=per_page)


def normalize_parent_ids(raw):
    if raw is None or raw == '' or raw == []:
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)) and all(
            isinstance(x, str) and x for x in raw):
        return list(raw)
    raise CategoryTreeError('parentCategoryId must be an id or a list of ids')


def _direct_parent(ancestor_ids):
    if not ancestor_ids:
        return None
    parent = db.session.get(Category, ancestor_ids[-1])
    if parent is None:
        raise CategoryTreeError('Parent category not found')
    return parent


def _path_below(parent):
    """Ancestor list for a direct child of ``parent``."""
    if parent is None:
        return []
    return list(parent.parent_category_id or []) + [parent.id]


def _append_child(parent, child_id):
    children = list(parent.child_categories or [])
    if child_id not in children:
        children.append(child_id)
    # Reassign so the JSON column is flagged dirty.
    parent.child_categories = children


def _remove_child(parent, child_id):
    parent.child_categories = [
        c for c in (parent.child_categories or []) if c != child_id]


def add_category(category):
    """Insert ``category`` and register it on its direct parent.

    Only the last id of ``parent_category_id`` is taken from the caller; the
    rest of the path is copied from that parent. Both writes are flushed in
    the caller's transaction.
    """
    parent = _direct_parent(list(category.parent_category_id or []))
    category.parent_category_id = _path_below(parent) or None
    db.session.add(category)
    db.session.flush()
    if parent is not None:
        _append_child(parent, category.id)
    return category


def move_category(category, requested_ancestors):
    new_parent = _direct_parent(requested_ancestors)
    if new_parent is not None and (
            new_parent.id == category.id
            or category.id in (new_parent.parent_category_id or [])):
        raise CategoryTreeError('A category cannot be its own ancestor')
    if new_parent is not None and new_parent.id in descendant_ids(category):
        raise CategoryTreeError(
            'A category cannot be moved under its own descendant')

    old_parent_id = category.direct_parent_id
    if old_parent_id and (
            new_parent is None or new_parent.id != old_parent_id):
        old_parent = db.session.get(Category, old_parent_id)
        if old_parent is not None:
            _remove_child(old_parent, category.id)
    if new_parent is not None:
        _append_child(new_parent, category.id)
    category.parent_category_id = _path_below(new_parent) or None
    _rewrite_descendant_paths(category)


def _rewrite_descendant_paths(category):
    pending = [category]
    seen = {category.id}
    while pending:
        parent = pending.pop()
        path = _path_below(parent)
        for child_id in parent.child_categories or []:
            if child_id in seen:
                continue
            seen.add(child_id)
            child = db.session.get(Category, child_id)
            if child is not None:
                child.parent_category_id = list(path)
                pending.append(child)


def descendant_ids(category):
    seen = set()
    pending = list(category.child_categories or [])
    while pending:
        child_id = pending.pop()
        if child_id in seen:
            continue
        seen.add(child_id)
        child = db.session.get(Category, child_id)
        if child is not None:
            pending.extend(child.child_categories or [])
    return seen


def remove_category_permanently(category):
    if category.child_categories:
        raise CategoryTreeError('Category still has child categories')
    if Product.query.filter_by(category_id=category.id).first() is not None:
        raise CategoryTreeError('Category still has products')

    parent_id = category.direct_parent_id
    if parent_id:
        parent = db.session.get(Category, parent_id)
        if parent is not None:
            _remove_child(parent, category.id)
    db.session.delete(category)


def resolve_active_categories(ids):
    """Load categories by id, preserving order; missing or inactive ids map
    to None."""
    if not ids:
        return []
    rows = Category.query.filter(
        Category.id.in_(ids),
        Category.status == CategoryStatus.ACTIVE,
    ).all()
    by_id = {str(c.id): c for c in rows}
    return [by_id.get(str(i)) for i in ids]
