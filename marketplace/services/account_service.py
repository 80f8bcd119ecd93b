from marketplace.extensions import db
from marketplace.models import User, UserRole, UserStatus
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger(__name__)


def load_or_provision_user(identity):
    user = db.session.get(User, identity['id'])
    if user is not None:
        return user

    metadata = identity.get('user_metadata') or {}
    user = User(
        id=identity['id'],
        email=identity.get('email'),
        first_name=metadata.get('first_name') or metadata.get('firstName'),
        last_name=metadata.get('last_name') or metadata.get('lastName'),
        phone_number=identity.get('phone') or None,
        role=UserRole.USER,
        status=UserStatus.ACTIVE,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent request provisioned the same identity first.
        db.session.rollback()
        existing = db.session.get(User, identity['id'])
        if existing is None:
            raise
        return existing
    logger.info("Provisioned user row for identity %s", user.id)
    return user
