import os

os.environ.setdefault('LOG_FILE', os.devnull)

import pytest  # noqa: E402

from marketplace import create_app  # noqa: E402
from marketplace.config import Config  # noqa: E402
from marketplace.extensions import db  # noqa: E402
from marketplace.models import (  # noqa: E402
    BusinessProfile,
    BusinessStatus,
    Category,
    CategoryStatus,
    Product,
    ProductStatus,
    User,
    UserRole,
    UserStatus,
)
from marketplace.services import auth_provider  # noqa: E402


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SUPABASE_URL = 'https://auth.example.test'
    SUPABASE_SERVICE_KEY = 'service-key'


def fake_fetch_identity(token):
    if token == 'provider-down':
        raise auth_provider.AuthProviderError('connection refused')
    if not token.startswith('token-'):
        return None
    user_id = token[len('token-'):]
    return {
        'id': user_id,
        'email': f'{user_id}@example.com',
        'user_metadata': {'first_name': 'New', 'last_name': 'Comer'},
    }


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(auth_provider, 'fetch_identity', fake_fetch_identity)
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth():
    def _headers(user_id):
        return {'Authorization': f'Bearer token-{user_id}'}
    return _headers


@pytest.fixture
def make_user(app):
    counter = {'n': 0}

    def _make(role=UserRole.USER, status=UserStatus.ACTIVE, **fields):
        counter['n'] += 1
        user_id = fields.pop('id', f'user-{counter["n"]}')
        with app.app_context():
            db.session.add(User(
                id=user_id,
                email=fields.pop('email', f'{user_id}@example.com'),
                role=role,
                status=status,
                **fields
            ))
            db.session.commit()
        return user_id
    return _make


@pytest.fixture
def make_profile(app):
    def _make(owner_id, status=BusinessStatus.ACTIVE, **fields):
        with app.app_context():
            profile = BusinessProfile(
                owner_id=owner_id,
                business_name=fields.pop('business_name', f'Shop {owner_id}'),
                slug=fields.pop('slug', f'shop-{owner_id}'),
                address=fields.pop('address', '12 Market Street'),
                business_phone=fields.pop('business_phone', '+100200300'),
                business_whatsapp_number=fields.pop(
                    'business_whatsapp_number', '+100200301'),
                business_email=fields.pop(
                    'business_email', f'{owner_id}@shop.test'),
                status=status,
                **fields
            )
            db.session.add(profile)
            db.session.flush()
            owner = db.session.get(User, owner_id)
            owner.business_profile_id = profile.id
            if status == BusinessStatus.ACTIVE and owner.role == UserRole.USER:
                owner.role = UserRole.VENDOR
            db.session.commit()
            return profile.id
    return _make


@pytest.fixture
def make_product(app):
    def _make(profile_id, status=ProductStatus.ACTIVE, **fields):
        with app.app_context():
            product = Product(
                product_owner_id=profile_id,
                name=fields.pop('name', 'Chair'),
                price=fields.pop('price', 20),
                images=fields.pop('images', []),
                tags=fields.pop('tags', []),
                status=status,
                **fields
            )
            db.session.add(product)
            db.session.commit()
            return product.id
    return _make


@pytest.fixture
def make_category(app):
    def _make(name, parents=None, status=CategoryStatus.ACTIVE):
        from marketplace.services.catalog_service import add_category
        from marketplace.utils import slugify
        with app.app_context():
            category = add_category(Category(
                name=name,
                slug=slugify(name),
                parent_category_id=list(parents) if parents else None,
                child_categories=[],
                status=status,
            ))
            db.session.commit()
            return category.id
    return _make


@pytest.fixture
def admin_id(make_user):
    return make_user(role=UserRole.ADMIN, id='admin-1')
