from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from marketplace.extensions import db
from marketplace.models import (
    BusinessProfile,
    BusinessStatus,
    Category,
    CategoryStatus,
    Product,
    ProductContactView,
    ProductStatus,
)
from marketplace.schemas import ProductSchema
from marketplace.serializers import (
    product_to_dict,
    vendor_preview,
    vendor_summary,
)
from marketplace.services.catalog_service import search_products
from marketplace.utils import (
    json_error,
    object_permission_required,
    page_args,
    page_envelope,
)
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('products', __name__)

product_schema = ProductSchema()

PRODUCTS_PER_PAGE = 12
LIST_FILTERS = ('category', 'tag', 'minPrice', 'maxPrice', 'vendorLocation',
                'q')


def _product_owner(product):
    return product.vendor.owner_id if product.vendor else None


def _check_category(category_id):
    if not category_id:
        return None
    category = db.session.get(Category, category_id)
    if category is None or category.status != CategoryStatus.ACTIVE:
        return json_error('Category not found', 400)
    return None


@bp.route('/api/products', methods=['GET'])
def list_products():
    page, limit = page_args(
        default_limit=PRODUCTS_PER_PAGE, limit_aliases=('perPage',))
    filters = {
        name: request.args.get(name).strip()
        for name in LIST_FILTERS
        if (request.args.get(name) or '').strip()
    }

    result = search_products(
        filters=filters,
        sort_by=request.args.get('sort', 'newest'),
        page=page,
        per_page=limit,
    )

    return jsonify(page_envelope(
        result,
        'products',
        [product_to_dict(p, vendor=vendor_summary(p.vendor))
         for p in result['items']],
    ))


@bp.route('/api/products/<product_id>', methods=['GET'])
def get_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        return json_error('Product not found', 404)

    vendor = vendor_preview(
        product.vendor, include_contact=current_user.is_authenticated)
    return jsonify({
        'success': True,
        'product': product_to_dict(product, vendor=vendor),
    })


@bp.route('/api/products', methods=['POST'])
@login_required
def add_product():
    payload = product_schema.load(request.get_json(silent=True) or {})

    profile = BusinessProfile.query.filter_by(
        owner_id=current_user.id).first()
    if profile is None:
        return json_error('Vendor profile required to add products', 400)
    if profile.status in (BusinessStatus.REJECTED, BusinessStatus.SUSPENDED):
        return json_error(
            f'Vendor profile is {profile.status.value}; '
            'products cannot be added', 400)

    error = _check_category(payload.get('category_id'))
    if error:
        return error

    product = Product(
        product_owner_id=profile.id,
        name=payload['name'],
        description=payload.get('description'),
        price=payload['price'],
        images=payload.get('images') or [],
        category_id=payload.get('category_id') or None,
        tags=payload.get('tags') or [],
        condition=payload.get('condition'),
        vendor_location=payload.get('vendor_location'),
        status=(ProductStatus.ACTIVE
                if profile.status == BusinessStatus.ACTIVE
                else ProductStatus.PENDING),
    )
    db.session.add(product)
    profile.total_products = (profile.total_products or 0) + 1
    db.session.commit()

    logger.info(
        "Business profile %s added product %s (%s)",
        profile.id,
        product.id,
        product.status.value,
    )
    return jsonify({
        'success': True,
        'product': product_to_dict(product, vendor=vendor_summary(profile)),
    }), 201


@bp.route('/api/products/<product_id>', methods=['PATCH'])
@login_required
@object_permission_required(
    Product,
    id_param='product_id',
    owner_of=_product_owner,
    not_found_message='Product not found')
def update_product(product_id, resource):
    updates = product_schema.load(
        request.get_json(silent=True) or {}, partial=True)
    if not updates:
        return json_error('No valid fields to update', 400)

    if 'category_id' in updates:
        error = _check_category(updates['category_id'])
        if error:
            return error

    for field, value in updates.items():
        if field in ('images', 'tags') and value is None:
            value = []
        setattr(resource, field, value)
    db.session.commit()

    return jsonify({
        'success': True,
        'product': product_to_dict(
            resource, vendor=vendor_summary(resource.vendor)),
    })


@bp.route('/api/products/<product_id>', methods=['DELETE'])
@login_required
@object_permission_required(
    Product,
    id_param='product_id',
    owner_of=_product_owner,
    not_found_message='Product not found')
def delete_product(product_id, resource):
    if resource.status != ProductStatus.DELETED:
        resource.status = ProductStatus.DELETED
        vendor = resource.vendor
        if vendor is not None and vendor.total_products:
            vendor.total_products -= 1
        db.session.commit()

    return jsonify({
        'success': True,
        'message': 'Product soft-deleted',
        'product': product_to_dict(
            resource, vendor=vendor_summary(resource.vendor)),
    })


@bp.route('/api/products/<product_id>/contact-view', methods=['POST'])
@login_required
def record_contact_view(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        return json_error('Product not found', 404)

    vendor = product.vendor
    db.session.add(ProductContactView(
        product_id=product.id,
        user_id=current_user.id,
        vendor_id=vendor.id if vendor else None,
    ))
    # Atomic increment in SQL.
    Product.query.filter_by(id=product.id).update(
        {Product.views_count: Product.views_count + 1},
        synchronize_session=False,
    )
    db.session.commit()

    contact = {
        'phone': vendor.business_phone if vendor else None,
        'whatsapp': vendor.business_whatsapp_number if vendor else None,
        'email': vendor.business_email if vendor else None,
        'address': vendor.address if vendor else None,
    }
    return jsonify({'success': True, 'contact': contact})
