from functools import wraps
from flask import current_app, jsonify, request
from flask_login import current_user
from marketplace.extensions import db
import logging
import re

logger = logging.getLogger(__name__)


def json_error(message, status_code, error=None):
    body = {'success': False, 'message': message}
    if error is not None:
        body['error'] = error
    return jsonify(body), status_code


def page_args(default_limit=None, limit_aliases=()):
    if default_limit is None:
        default_limit = current_app.config.get('DEFAULT_PAGE_SIZE', 10)
    max_limit = current_app.config.get('MAX_PAGE_SIZE', 100)

    page = max(1, request.args.get('page', 1, type=int))
    limit = request.args.get('limit', type=int)
    for alias in limit_aliases:
        if limit is None:
            limit = request.args.get(alias, type=int)
    if limit is None or limit < 1:
        limit = default_limit
    return page, min(limit, max_limit)


def paginate_query(query, page=1, per_page=20):
    pagination = query.paginate(
        page=page,
        per_page=per_page,
        error_out=False
    )
    return {
        'items': pagination.items,
        'page': pagination.page,
        'limit': pagination.per_page,
        'total': pagination.total,
        # ceil(total / limit); 0 when there are no rows
        'totalPages': pagination.pages,
    }


def page_envelope(result, key, items):
    return {
        'success': True,
        key: items,
        'page': result['page'],
        'limit': result['limit'],
        'total': result['total'],
        'totalPages': result['totalPages'],
    }


_SLUG_STRIP = re.compile(r'[^a-z0-9]+')


def slugify(value):
    return _SLUG_STRIP.sub('-', (value or '').lower()).strip('-')


def unique_slug(model_class, value, exclude_id=None):
    base = slugify(value) or 'item'
    slug = base
    suffix = 2
    while True:
        query = model_class.query.filter_by(slug=slug)
        if exclude_id is not None:
            query = query.filter(model_class.id != exclude_id)
        if query.first() is None:
            return slug
        slug = f'{base}-{suffix}'
        suffix += 1


LIKE_ESCAPE = '\\'


def escape_like(term):
    return (term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace('%', LIKE_ESCAPE + '%')
            .replace('_', LIKE_ESCAPE + '_'))


def like_pattern(term):
    """Substring pattern for ``ilike``; pass ``escape=LIKE_ESCAPE``."""
    return f'%{escape_like(term.strip())}%'


def object_permission_required(
        model_class,
        id_param='id',
        owner_of=None,
        not_found_message='Resource not found'):
    """Load the resource named by ``id_param`` and require its owner or an
    admin. ``owner_of`` maps the resource to its owning user id."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            resource_id = kwargs.get(id_param)
            resource = db.session.get(model_class, resource_id)
            if resource is None:
                return json_error(not_found_message, 404)

            owner_id = owner_of(resource) if owner_of else getattr(
                resource, 'owner_id', None)
            if owner_id != current_user.id and not current_user.is_admin:
                logger.warning(
                    "User %s attempted to modify %s %s",
                    current_user.id,
                    model_class.__name__,
                    resource_id,
                )
                return json_error('Forbidden', 403)

            kwargs['resource'] = resource
            return f(*args, **kwargs)
        return decorated_function
    return decorator
