from flask import Blueprint, request, jsonify
from flask_login import login_required
from marketplace.extensions import db
from marketplace.middleware import role_required
from marketplace.models import AdminLog
from marketplace.serializers import admin_log_to_dict
from marketplace.services.stats_service import activity_summary
from marketplace.utils import (
    json_error,
    page_args,
    page_envelope,
    paginate_query,
)
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('admin_logs', __name__)

LOGS_PER_PAGE = 50


def _parse_date(raw):
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.strip().replace('Z', '+00:00'))
    except ValueError:
        return False


def _date_range():
    start = _parse_date(request.args.get('startDate'))
    end = _parse_date(request.args.get('endDate'))
    if start is False or end is False:
        return None, None, json_error('Invalid date', 400)
    # Stored timestamps are naive UTC.
    if start is not None and start.tzinfo is not None:
        start = start.replace(tzinfo=None) - start.utcoffset()
    if end is not None and end.tzinfo is not None:
        end = end.replace(tzinfo=None) - end.utcoffset()
    return start, end, None


def _filter_range(query, start, end):
    if start is not None:
        query = query.filter(AdminLog.created_at >= start)
    if end is not None:
        query = query.filter(AdminLog.created_at <= end)
    return query


@bp.route('/api/admin/logs', methods=['GET'])
@login_required
@role_required('admin')
def list_logs():
    page, limit = page_args(default_limit=LOGS_PER_PAGE)
    start, end, error = _date_range()
    if error:
        return error

    query = AdminLog.query
    if request.args.get('adminId'):
        query = query.filter(AdminLog.admin_id == request.args['adminId'])
    if request.args.get('action'):
        query = query.filter(AdminLog.action == request.args['action'])
    query = _filter_range(query, start, end)
    query = query.order_by(AdminLog.created_at.desc())

    result = paginate_query(query, page=page, per_page=limit)
    return jsonify(page_envelope(
        result, 'logs', [admin_log_to_dict(e) for e in result['items']]))


@bp.route('/api/admin/logs/summary', methods=['GET'])
@login_required
@role_required('admin')
def get_activity_summary():
    start, end, error = _date_range()
    if error:
        return error

    entries = _filter_range(AdminLog.query, start, end).all()
    summary = activity_summary(entries)
    return jsonify({'success': True, **summary})


@bp.route('/api/admin/logs/<log_id>', methods=['GET'])
@login_required
@role_required('admin')
def get_log(log_id):
    entry = db.session.get(AdminLog, log_id)
    if entry is None:
        return json_error('Log not found', 404)
    return jsonify({'success': True, 'log': admin_log_to_dict(entry)})
