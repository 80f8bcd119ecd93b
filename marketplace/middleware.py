from flask import g, jsonify
from flask_login import current_user
from functools import wraps
from marketplace.extensions import db
from marketplace.models import User, UserStatus
from marketplace.services import auth_provider
from marketplace.services.account_service import load_or_provision_user
import logging

logger = logging.getLogger(__name__)


def setup_auth_middleware(login_manager):

    @login_manager.request_loader
    def load_user_from_request(request):
        token = auth_provider.bearer_token(request.headers.get('Authorization'))
        if not token:
            return None

        try:
            identity = auth_provider.fetch_identity(token)
        except auth_provider.AuthProviderError as e:
            logger.warning("Token verification failed: %s", e)
            g.auth_failure = 'Invalid token'
            return None

        if not identity:
            g.auth_failure = 'Invalid token'
            return None

        user = load_or_provision_user(identity)
        if user.status != UserStatus.ACTIVE:
            logger.info(
                "Rejected credentials of %s account %s",
                user.status.value,
                user.id,
            )
            g.auth_failure = 'Account is not active'
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        message = g.get('auth_failure') or 'Unauthorized'
        return jsonify({'success': False, 'message': message}), 401


def role_required(*allowed_roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({'success': False,
                                'message': 'Unauthorized'}), 401

            # Read the stored role, never a value carried by the token.
            role = db.session.query(User.role).filter_by(
                id=current_user.id).scalar()
            role_value = getattr(role, 'value', role)
            if role_value not in allowed_roles:
                logger.warning(
                    "User %s attempted to access roles %s, current role: %s",
                    current_user.id,
                    allowed_roles,
                    role_value,
                )
                return jsonify({'success': False,
                                'message': 'Access denied'}), 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator
