from flask import current_app
import logging
import requests

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """The identity provider could not be reached or answered unexpectedly."""


def bearer_token(header_value):
    if not header_value:
        return None
    parts = header_value.split(None, 1)
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None
    token = parts[1].strip()
    return token or None


def fetch_identity(token):
    """Exchange an access token for the identity it was issued to.

    Returns the provider's user object (a dict with at least ``id``), or
    None when the provider rejects the token. One request, no retry.
    """
    base_url = (current_app.config.get('SUPABASE_URL') or '').rstrip('/')
    if not base_url:
        raise AuthProviderError('SUPABASE_URL is not configured')

    try:
        resp = requests.get(
            f'{base_url}/auth/v1/user',
            headers={
                'apikey': current_app.config.get('SUPABASE_SERVICE_KEY', ''),
                'Authorization': f'Bearer {token}',
            },
            timeout=current_app.config.get('AUTH_PROVIDER_TIMEOUT', 5),
        )
    except requests.RequestException as e:
        raise AuthProviderError(f'Auth provider unreachable: {e}') from e

    if resp.status_code in (400, 401, 403, 404):
        return None
    if resp.status_code >= 300:
        raise AuthProviderError(
            f'Auth provider returned HTTP {resp.status_code}')

    try:
        identity = resp.json()
    except ValueError as e:
        raise AuthProviderError('Auth provider returned invalid JSON') from e

    if not isinstance(identity, dict) or not identity.get('id'):
        return None
    return identity
