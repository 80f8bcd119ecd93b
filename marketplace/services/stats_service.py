from collections import Counter
from marketplace.extensions import db
from marketplace.models import (
    BusinessProfile,
    BusinessStatus,
    Product,
    ProductStatus,
    User,
    UserRole,
    UserStatus,
)


def _count_by(rows):
    return Counter(row[0] for row in rows)


def dashboard_stats():
    # Row sets are fetched and reduced here rather than aggregated in SQL.
    users = db.session.query(User.status).filter(
        User.role.in_([UserRole.USER, UserRole.VENDOR])).all()
    businesses = db.session.query(BusinessProfile.status).all()
    products = db.session.query(Product.status).all()

    user_counts = _count_by(users)
    business_counts = _count_by(businesses)
    product_counts = _count_by(products)

    return {
        'users': {
            'total': len(users),
            'active': user_counts[UserStatus.ACTIVE],
            'suspended': user_counts[UserStatus.SUSPENDED],
            'deleted': user_counts[UserStatus.DELETED],
        },
        'businesses': {
            'total': len(businesses),
            'pending': business_counts[BusinessStatus.PENDING_VERIFICATION],
            'active': business_counts[BusinessStatus.ACTIVE],
            'rejected': business_counts[BusinessStatus.REJECTED],
            'suspended': business_counts[BusinessStatus.SUSPENDED],
        },
        'products': {
            'total': len(products),
            'active': product_counts[ProductStatus.ACTIVE],
            'inactive': product_counts[ProductStatus.INACTIVE],
            'pending': product_counts[ProductStatus.PENDING],
            'deleted': product_counts[ProductStatus.DELETED],
        },
    }


def activity_summary(entries):
    by_action = Counter(e.action for e in entries)
    by_day = Counter(e.created_at.date().isoformat() for e in entries)
    return {
        'actionCounts': [
            {'action': action, 'count': count}
            for action, count in by_action.most_common()
        ],
        'timeline': [
            {'date': day, 'count': by_day[day]}
            for day in sorted(by_day)
        ],
    }
