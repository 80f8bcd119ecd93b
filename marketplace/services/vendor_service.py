from marketplace.models import (
    BusinessStatus,
    Product,
    ProductStatus,
    UserRole,
)
import logging

logger = logging.getLogger(__name__)

# Owner role implied by each business profile status. Pending profiles leave
# the role untouched.
ROLE_FOR_STATUS = {
    BusinessStatus.ACTIVE: UserRole.VENDOR,
    BusinessStatus.REJECTED: UserRole.USER,
    BusinessStatus.SUSPENDED: UserRole.USER,
}


def apply_business_status(profile, new_status, reason=None):
    """Move ``profile`` to ``new_status`` and carry the owner's role with it.

    Nothing is committed here; the caller commits the profile, the owner and
    any promoted products together.
    """
    old_status = profile.status
    profile.status = new_status
    if reason is not None:
        profile.status_update_reason = reason

    owner = profile.owner
    if owner is not None:
        if owner.business_profile_id != profile.id:
            owner.business_profile_id = profile.id
        new_role = ROLE_FOR_STATUS.get(new_status)
        # Admin accounts keep their role whatever their storefront does.
        if new_role is not None and owner.role != UserRole.ADMIN:
            owner.role = new_role

    promoted = 0
    if new_status == BusinessStatus.ACTIVE:
        promoted = Product.query.filter_by(
            product_owner_id=profile.id,
            status=ProductStatus.PENDING,
        ).update(
            {Product.status: ProductStatus.ACTIVE},
            synchronize_session='fetch',
        )

    logger.info(
        "Business profile %s: %s -> %s (owner role %s, %s products activated)",
        profile.id,
        old_status.value if old_status else None,
        new_status.value,
        owner.role.value if owner is not None else None,
        promoted,
    )
    return old_status
