from marketplace.extensions import db
from marketplace.models import AdminLog
from flask import has_request_context, request
import logging
import json

logger = logging.getLogger(__name__)


def log_admin_activity(
        admin_id,
        action,
        target_id=None,
        target_type=None,
        details=None,
        ip_address=None):
    # Best-effort: the admin action has already been committed, so a failed
    # log write is reported and dropped.
    try:
        if not ip_address and has_request_context():
            ip_address = request.remote_addr

        entry = AdminLog(
            admin_id=admin_id,
            action=action,
            target_id=str(target_id) if target_id is not None else None,
            target_type=target_type,
            details=details or {},
            ip_address=ip_address,
        )
        db.session.add(entry)
        db.session.commit()

        details_brief = None
        try:
            details_brief = json.dumps(
                details or {}, ensure_ascii=False, separators=(',', ':'))
            if len(details_brief) > 600:
                details_brief = details_brief[:600] + '...'
        except (TypeError, ValueError):
            details_brief = None

        logger.info(
            "ADMIN_LOG action=%s admin_id=%s target_type=%s target_id=%s "
            "details=%s",
            action,
            admin_id,
            target_type,
            target_id,
            details_brief,
        )
        return entry

    except Exception as e:
        logger.error(f"Failed to log admin activity: {e}", exc_info=True)
        db.session.rollback()
        return None
