from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from marketplace.extensions import db
from marketplace.models import User, UserStatus
from marketplace.serializers import (
    BUSINESS_CONTACT_FIELDS,
    business_profile_to_dict,
    user_to_dict,
)
from marketplace.utils import json_error
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('users', __name__)

EDITABLE_FIELDS = (
    'first_name',
    'last_name',
    'profile_picture',
    'phone_number',
    'whatsapp_number',
    'shop_link',
    'profile_link',
)


def _own_record(user):
    data = user_to_dict(user, include_contact=True)
    profile = user.business_profile
    data['business_profile'] = (
        business_profile_to_dict(profile, include_contact=True)
        if profile else None
    )
    return data


@bp.route('/api/users/me', methods=['GET'])
@login_required
def get_me():
    user = db.session.get(User, current_user.id)
    if user is None:
        return json_error('User not found.', 404)
    return jsonify({'success': True, 'data': _own_record(user)})


@bp.route('/api/users/me', methods=['PATCH'])
@login_required
def update_me():
    data = request.get_json(silent=True) or {}
    updates = {
        field: data[field] for field in EDITABLE_FIELDS if field in data
    }
    if not updates:
        return json_error('No valid fields to update.', 400)

    user = db.session.get(User, current_user.id)
    if user is None:
        return json_error('User not found.', 404)

    for field, value in updates.items():
        setattr(user, field, value)
    db.session.commit()

    return jsonify({'success': True, 'data': _own_record(user)})


@bp.route('/api/users/me', methods=['DELETE'])
@login_required
def deactivate_me():
    user = db.session.get(User, current_user.id)
    if user is None:
        return json_error('User not found.', 404)

    user.status = UserStatus.DELETED
    db.session.commit()
    logger.info("User %s deactivated their account", user.id)

    return jsonify({'success': True, 'message': 'Account deactivated.'})


@bp.route('/api/users/<user_id>', methods=['GET'])
def get_user_profile(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found.', 404)

    viewer_authenticated = current_user.is_authenticated
    is_self = viewer_authenticated and current_user.id == user.id
    can_see_personal = is_self or (
        viewer_authenticated and current_user.is_admin)

    public_user = user_to_dict(user, include_contact=can_see_personal)

    profile = user.business_profile
    if profile is not None:
        business = {
            'id': profile.id,
            'business_name': profile.business_name,
            'slug': profile.slug,
            'profile_image': profile.profile_image,
            'cover_image': profile.cover_image,
            'description': profile.description,
            'address': profile.address,
            'status': profile.status.value,
            'total_products': profile.total_products or 0,
            'rating': float(profile.rating) if profile.rating else None,
        }
        if viewer_authenticated:
            for field in BUSINESS_CONTACT_FIELDS:
                business[field] = getattr(profile, field)
        public_user['business'] = business

    return jsonify({'success': True, 'publicUser': public_user})
