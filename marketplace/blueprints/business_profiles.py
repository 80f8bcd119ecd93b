from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from marketplace.extensions import db
from marketplace.models import BusinessProfile, BusinessStatus, User
from marketplace.schemas import (
    BusinessProfileSchema,
    BusinessProfileUpdateSchema,
)
from marketplace.serializers import business_profile_to_dict
from marketplace.services.vendor_service import apply_business_status
from marketplace.utils import (
    json_error,
    LIKE_ESCAPE,
    like_pattern,
    object_permission_required,
    page_args,
    page_envelope,
    paginate_query,
    unique_slug,
)
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('business_profiles', __name__)

create_schema = BusinessProfileSchema()
update_schema = BusinessProfileUpdateSchema()


@bp.route('/api/businessProfile', methods=['POST'])
@login_required
def create_business_profile():
    payload = create_schema.load(request.get_json(silent=True) or {})

    user = db.session.get(User, current_user.id)
    existing = BusinessProfile.query.filter_by(owner_id=user.id).first()
    if existing is not None:
        return json_error('Business profile already exists', 400)

    profile = BusinessProfile(
        owner_id=user.id,
        slug=unique_slug(BusinessProfile, payload['business_name']),
        status=BusinessStatus.PENDING_VERIFICATION,
        **payload
    )
    db.session.add(profile)
    db.session.flush()

    # Linked now; the vendor role is only granted on approval.
    user.business_profile_id = profile.id
    db.session.commit()

    logger.info("User %s created business profile %s", user.id, profile.id)
    return jsonify({
        'success': True,
        'businessProfile': business_profile_to_dict(
            profile, include_contact=True),
    }), 201


@bp.route('/api/businessProfile', methods=['GET'])
def list_business_profiles():
    page, limit = page_args()
    search = (request.args.get('search') or '').strip()

    query = BusinessProfile.query.filter_by(status=BusinessStatus.ACTIVE)
    if search:
        query = query.filter(
            BusinessProfile.business_name.ilike(
                like_pattern(search), escape=LIKE_ESCAPE))
    query = query.order_by(BusinessProfile.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    return jsonify(page_envelope(
        result,
        'businessProfiles',
        [business_profile_to_dict(p) for p in result['items']],
    ))


@bp.route('/api/businessProfile/<profile_id>', methods=['GET'])
def get_business_profile(profile_id):
    profile = db.session.get(BusinessProfile, profile_id)
    if profile is None:
        return json_error('Business profile not found', 404)

    return jsonify({
        'success': True,
        'businessProfile': business_profile_to_dict(
            profile, include_contact=current_user.is_authenticated),
    })


@bp.route('/api/businessProfile/<profile_id>', methods=['PATCH'])
@login_required
@object_permission_required(
    BusinessProfile,
    id_param='profile_id',
    not_found_message='Business profile not found')
def update_business_profile(profile_id, resource):
    updates = update_schema.load(request.get_json(silent=True) or {})
    if not updates:
        return json_error('No valid fields to update', 400)

    if 'business_name' in updates:
        resource.slug = unique_slug(
            BusinessProfile, updates['business_name'], exclude_id=resource.id)
    for field, value in updates.items():
        setattr(resource, field, value)
    db.session.commit()

    return jsonify({
        'success': True,
        'businessProfile': business_profile_to_dict(
            resource, include_contact=True),
    })


@bp.route('/api/businessProfile/<profile_id>', methods=['DELETE'])
@login_required
@object_permission_required(
    BusinessProfile,
    id_param='profile_id',
    not_found_message='Business profile not found')
def delete_business_profile(profile_id, resource):
    # Soft delete: the storefront is suspended and the owner loses the
    # vendor role in the same transaction.
    apply_business_status(resource, BusinessStatus.SUSPENDED)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': 'Business profile deleted',
        'businessProfile': business_profile_to_dict(
            resource, include_contact=True),
    })
