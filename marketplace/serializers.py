# Business profile fields only shown to authenticated viewers.
BUSINESS_CONTACT_FIELDS = (
    'business_phone',
    'business_whatsapp_number',
    'business_email',
)
# User fields only shown to the user themself (or an admin).
USER_CONTACT_FIELDS = ('email', 'phone_number', 'whatsapp_number')


def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return float(value) if value is not None else None


def user_to_dict(user, include_contact=True):
    data = {
        'id': user.id,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'profile_picture': user.profile_picture,
        'shop_link': user.shop_link,
        'profile_link': user.profile_link,
        'role': user.role.value,
        'status': user.status.value,
        'business_profile_id': user.business_profile_id,
        'created_at': _iso(user.created_at),
    }
    if include_contact:
        for field in USER_CONTACT_FIELDS:
            data[field] = getattr(user, field)
    return data


def business_profile_to_dict(profile, include_contact=False):
    data = {
        'id': profile.id,
        'owner_id': profile.owner_id,
        'business_name': profile.business_name,
        'slug': profile.slug,
        'address': profile.address,
        'description': profile.description,
        'cover_image': profile.cover_image,
        'profile_image': profile.profile_image,
        'status': profile.status.value,
        'total_products': profile.total_products or 0,
        'rating': _money(profile.rating),
        'created_at': _iso(profile.created_at),
        'updated_at': _iso(profile.updated_at),
    }
    if include_contact:
        for field in BUSINESS_CONTACT_FIELDS:
            data[field] = getattr(profile, field)
    return data


def vendor_summary(profile):
    if profile is None:
        return None
    return {
        'id': profile.id,
        'business_name': profile.business_name,
        'cover_image': profile.cover_image,
    }


def vendor_preview(profile, include_contact=False):
    if profile is None:
        return None
    data = {
        'id': profile.id,
        'business_name': profile.business_name,
        'profile_image': profile.profile_image,
        'cover_image': profile.cover_image,
        'address': profile.address,
    }
    if include_contact:
        for field in BUSINESS_CONTACT_FIELDS:
            data[field] = getattr(profile, field)
    return data


def product_to_dict(product, vendor=None):
    return {
        'id': product.id,
        'product_owner_id': product.product_owner_id,
        'name': product.name,
        'description': product.description,
        'price': _money(product.price),
        'images': list(product.images or []),
        'category_id': product.category_id,
        'tags': list(product.tags or []),
        'condition': product.condition,
        'vendor_location': product.vendor_location,
        'status': product.status.value,
        'views_count': product.views_count or 0,
        'created_at': _iso(product.created_at),
        'updated_at': _iso(product.updated_at),
        'vendor': vendor,
    }


def category_to_dict(category):
    return {
        'id': category.id,
        'name': category.name,
        'slug': category.slug,
        'parent_category_id': list(category.parent_category_id or []),
        'child_categories': list(category.child_categories or []),
        'description': category.description,
        'icon': category.icon,
        'image': category.image,
        'status': category.status.value,
        'created_at': _iso(category.created_at),
        'updated_at': _iso(category.updated_at),
    }


def admin_log_to_dict(entry):
    return {
        'id': entry.id,
        'admin_id': entry.admin_id,
        'admin_email': entry.admin.email if entry.admin else None,
        'action': entry.action,
        'target_id': entry.target_id,
        'target_type': entry.target_type,
        'details': entry.details or {},
        'ip_address': entry.ip_address,
        'created_at': _iso(entry.created_at),
    }
