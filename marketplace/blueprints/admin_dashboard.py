from flask import Blueprint, current_app, request, jsonify
from flask_login import login_required, current_user
from marketplace.extensions import db
from marketplace.middleware import role_required
from marketplace.models import (
    AdminLog,
    BusinessProfile,
    BusinessStatus,
    User,
    UserRole,
    UserStatus,
)
from marketplace.serializers import (
    admin_log_to_dict,
    business_profile_to_dict,
    user_to_dict,
)
from marketplace.services.activity_log_service import log_admin_activity
from marketplace.services.stats_service import dashboard_stats
from marketplace.services.vendor_service import apply_business_status
from marketplace.utils import (
    json_error,
    LIKE_ESCAPE,
    like_pattern,
    page_args,
    page_envelope,
    paginate_query,
)
from datetime import datetime, timedelta
from sqlalchemy import or_
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('admin_dashboard', __name__)


def _parse_enum(enum_cls, raw):
    try:
        return enum_cls((raw or '').strip())
    except ValueError:
        return None


def _business_search(query, search):
    pattern = like_pattern(search)
    return query.filter(or_(
        BusinessProfile.business_name.ilike(pattern, escape=LIKE_ESCAPE),
        BusinessProfile.business_email.ilike(pattern, escape=LIKE_ESCAPE),
    ))


def _owner_summary(user):
    if user is None:
        return None
    return {
        'id': user.id,
        'email': user.email,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'role': user.role.value,
    }


@bp.route('/api/admin/dashboard/users', methods=['GET'])
@login_required
@role_required('admin')
def list_users():
    page, limit = page_args()
    role = request.args.get('role')
    status = request.args.get('status')
    search = (request.args.get('search') or '').strip()

    query = User.query
    if role:
        role_enum = _parse_enum(UserRole, role)
        if role_enum is None:
            return json_error('Invalid role', 400)
        query = query.filter(User.role == role_enum)
    if status:
        status_enum = _parse_enum(UserStatus, status)
        if status_enum is None:
            return json_error('Invalid status', 400)
        query = query.filter(User.status == status_enum)
    if search:
        pattern = like_pattern(search)
        query = query.filter(or_(
            User.email.ilike(pattern, escape=LIKE_ESCAPE),
            User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
            User.last_name.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    query = query.order_by(User.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    return jsonify(page_envelope(
        result, 'users', [user_to_dict(u) for u in result['items']]))


@bp.route('/api/admin/dashboard/users/pending-verification', methods=['GET'])
@login_required
@role_required('admin')
def list_pending_business_profiles():
    page, limit = page_args()
    search = (request.args.get('search') or '').strip()

    query = BusinessProfile.query.filter_by(
        status=BusinessStatus.PENDING_VERIFICATION)
    if search:
        query = _business_search(query, search)
    query = query.order_by(BusinessProfile.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    return jsonify(page_envelope(
        result,
        'businessProfiles',
        [business_profile_to_dict(p, include_contact=True)
         for p in result['items']],
    ))


@bp.route('/api/admin/dashboard/users/<user_id>/status', methods=['PATCH'])
@login_required
@role_required('admin')
def update_user_status(user_id):
    data = request.get_json(silent=True) or {}
    new_status = _parse_enum(UserStatus, data.get('status'))
    if new_status is None:
        return json_error('Invalid status', 400)
    reason = data.get('reason')

    if user_id == current_user.id:
        return json_error('You cannot change your own status', 400)

    user = db.session.get(User, user_id)
    if user is None:
        return json_error('User not found', 404)
    if user.role == UserRole.ADMIN:
        return json_error('Cannot change admin status', 400)

    old_status = user.status
    user.status = new_status
    user.status_update_reason = reason
    db.session.commit()

    log_admin_activity(
        current_user.id,
        'UPDATE_USER_STATUS',
        target_id=user.id,
        target_type='user',
        details={
            'oldStatus': old_status.value,
            'newStatus': new_status.value,
            'reason': reason,
        },
    )

    return jsonify({
        'success': True,
        'message': 'User status updated successfully',
        'user': user_to_dict(user),
    })


@bp.route('/api/admin/dashboard/businessProfile', methods=['GET'])
@login_required
@role_required('admin')
def list_business_profiles():
    page, limit = page_args()
    status = request.args.get('status')
    search = (request.args.get('search') or '').strip()

    query = BusinessProfile.query
    if status:
        status_enum = _parse_enum(BusinessStatus, status)
        if status_enum is None:
            return json_error('Invalid status', 400)
        query = query.filter(BusinessProfile.status == status_enum)
    if search:
        query = _business_search(query, search)
    query = query.order_by(BusinessProfile.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    items = []
    for profile in result['items']:
        item = business_profile_to_dict(profile, include_contact=True)
        item['owner'] = _owner_summary(profile.owner)
        items.append(item)
    return jsonify(page_envelope(result, 'businessProfiles', items))


@bp.route('/api/admin/dashboard/businessProfile/<profile_id>/status',
          methods=['PATCH'])
@login_required
@role_required('admin')
def update_business_profile_status(profile_id):
    data = request.get_json(silent=True) or {}
    new_status = _parse_enum(BusinessStatus, data.get('status'))
    if new_status is None:
        return json_error('Invalid status', 400)
    reason = data.get('reason')

    profile = db.session.get(BusinessProfile, profile_id)
    if profile is None:
        return json_error('Business profile not found', 404)

    # Profile status and owner role are committed together.
    old_status = apply_business_status(profile, new_status, reason=reason)
    db.session.commit()

    log_admin_activity(
        current_user.id,
        'UPDATE_BUSINESS_ACCOUNT_STATUS',
        target_id=profile.id,
        target_type='business_profile',
        details={
            'oldStatus': old_status.value if old_status else None,
            'newStatus': new_status.value,
            'reason': reason,
        },
    )

    return jsonify({
        'success': True,
        'message': 'Business status updated successfully',
        'businessAccount': business_profile_to_dict(
            profile, include_contact=True),
        'owner': _owner_summary(profile.owner),
    })


@bp.route('/api/admin/dashboard/stats', methods=['GET'])
@login_required
@role_required('admin')
def get_dashboard_stats():
    return jsonify({'success': True, 'stats': dashboard_stats()})


@bp.route('/api/admin/dashboard/activity', methods=['GET'])
@login_required
@role_required('admin')
def get_recent_activity():
    days = request.args.get('days', 30, type=int)
    action_type = (request.args.get('type') or '').strip()
    since = datetime.utcnow() - timedelta(days=max(0, days))

    query = AdminLog.query.filter(AdminLog.created_at >= since)
    if action_type:
        query = query.filter(AdminLog.action == action_type)
    entries = query.order_by(AdminLog.created_at.desc()).limit(
        current_app.config.get('RECENT_ACTIVITY_LIMIT', 100)).all()

    return jsonify({
        'success': True,
        'activities': [admin_log_to_dict(e) for e in entries],
    })
