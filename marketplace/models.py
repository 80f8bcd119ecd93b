from marketplace.extensions import db
from flask_login import UserMixin
from datetime import datetime
import enum
import uuid


class UserRole(enum.Enum):
    USER = 'user'
    VENDOR = 'vendor'
    ADMIN = 'admin'


class UserStatus(enum.Enum):
    ACTIVE = 'active'
    SUSPENDED = 'suspended'
    DELETED = 'deleted'


class BusinessStatus(enum.Enum):
    PENDING_VERIFICATION = 'pending_verification'
    ACTIVE = 'active'
    REJECTED = 'rejected'
    SUSPENDED = 'suspended'


class ProductStatus(enum.Enum):
    ACTIVE = 'active'
    PENDING = 'pending'
    INACTIVE = 'inactive'
    DELETED = 'delete'


class CategoryStatus(enum.Enum):
    ACTIVE = 'active'
    DELETED = 'deleted'


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _enum_column(enum_cls, name):
    # Persist the lowercase values ('pending_verification'), not member names.
    return db.Enum(enum_cls, name=name, values_callable=_enum_values)


def _new_id():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    # Same id as the identity issued by the auth provider.
    id = db.Column(db.String(36), primary_key=True)
    email = db.Column(db.String(255), nullable=True, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    phone_number = db.Column(db.String(30), nullable=True)
    whatsapp_number = db.Column(db.String(30), nullable=True)
    profile_picture = db.Column(db.String(500), nullable=True)
    shop_link = db.Column(db.String(500), nullable=True)
    profile_link = db.Column(db.String(500), nullable=True)
    role = db.Column(
        _enum_column(UserRole, 'user_role'),
        nullable=False,
        default=UserRole.USER)
    status = db.Column(
        _enum_column(UserStatus, 'user_status'),
        nullable=False,
        default=UserStatus.ACTIVE)
    status_update_reason = db.Column(db.Text, nullable=True)
    # Denormalized link to the owned storefront, set when it is created.
    business_profile_id = db.Column(db.String(36), nullable=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    business_profile = db.relationship(
        'BusinessProfile',
        primaryjoin='foreign(User.business_profile_id) == BusinessProfile.id',
        uselist=False,
        viewonly=True)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f'<User {self.id} {self.email}>'


class BusinessProfile(db.Model):
    __tablename__ = 'business_profile'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    owner_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'users.id',
            ondelete='CASCADE'),
        nullable=False,
        unique=True,
        index=True)
    business_name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    address = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=True)
    cover_image = db.Column(db.String(500), nullable=True)
    profile_image = db.Column(db.String(500), nullable=True)
    # Private contact fields
    business_email = db.Column(db.String(255), nullable=True)
    business_phone = db.Column(db.String(30), nullable=True)
    business_whatsapp_number = db.Column(db.String(30), nullable=True)
    status = db.Column(
        _enum_column(BusinessStatus, 'business_status'),
        nullable=False,
        default=BusinessStatus.PENDING_VERIFICATION,
        index=True)
    status_update_reason = db.Column(db.Text, nullable=True)
    total_products = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Numeric(3, 2), nullable=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    owner = db.relationship('User', foreign_keys=[owner_id])
    products = db.relationship('Product', back_populates='vendor',
                               lazy='dynamic')

    def __repr__(self):
        return f'<BusinessProfile {self.business_name}>'


class Category(db.Model):
    __tablename__ = 'category'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    # Ancestor ids, root first; the last entry is the direct parent.
    parent_category_id = db.Column(db.JSON, nullable=True)
    # Direct children, in creation order. Kept in sync with the children's
    # parent_category_id inside the same transaction.
    child_categories = db.Column(db.JSON, nullable=True)
    description = db.Column(db.Text, nullable=True)
    icon = db.Column(db.String(500), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    status = db.Column(
        _enum_column(CategoryStatus, 'category_status'),
        nullable=False,
        default=CategoryStatus.ACTIVE,
        index=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    @property
    def direct_parent_id(self):
        if not self.parent_category_id:
            return None
        return self.parent_category_id[-1]

    def __repr__(self):
        return f'<Category {self.name}>'


class Product(db.Model):
    __tablename__ = 'products'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    product_owner_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'business_profile.id',
            ondelete='CASCADE'),
        nullable=False,
        index=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)
    category_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'category.id',
            ondelete='SET NULL'),
        nullable=True,
        index=True)
    tags = db.Column(db.JSON, nullable=False, default=list)
    condition = db.Column(db.String(50), nullable=True)
    vendor_location = db.Column(db.String(255), nullable=True)
    status = db.Column(
        _enum_column(ProductStatus, 'product_status'),
        default=ProductStatus.PENDING,
        nullable=False,
        index=True)
    views_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    vendor = db.relationship('BusinessProfile', back_populates='products')
    category = db.relationship('Category')

    def __repr__(self):
        return f'<Product {self.name}>'


class ProductContactView(db.Model):
    __tablename__ = 'product_contact_views'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'products.id',
            ondelete='CASCADE'),
        nullable=False,
        index=True)
    user_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'users.id',
            ondelete='SET NULL'),
        nullable=True)
    vendor_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'business_profile.id',
            ondelete='SET NULL'),
        nullable=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)

    def __repr__(self):
        return f'<ProductContactView product={self.product_id}>'


class AdminLog(db.Model):
    __tablename__ = 'admin_log'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    admin_id = db.Column(
        db.String(36),
        db.ForeignKey(
            'users.id',
            ondelete='SET NULL'),
        nullable=True,
        index=True)
    # e.g., UPDATE_USER_STATUS, UPDATE_BUSINESS_ACCOUNT_STATUS
    action = db.Column(db.String(100), nullable=False, index=True)
    target_id = db.Column(db.String(64), nullable=True)
    # user, business_profile, product, category
    target_type = db.Column(db.String(50), nullable=True)
    details = db.Column(db.JSON, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)

    admin = db.relationship('User', foreign_keys=[admin_id])

    def __repr__(self):
        return f'<AdminLog {self.id} action={self.action}>'
