import pytest

from marketplace.extensions import db
from marketplace.models import (
    BusinessProfile,
    BusinessStatus,
    CategoryStatus,
    Product,
    ProductContactView,
    ProductStatus,
)


@pytest.fixture
def vendor(make_user, make_profile):
    owner_id = make_user()
    return owner_id, make_profile(owner_id)


def test_add_product_without_profile(client, auth, make_user):
    user_id = make_user()
    resp = client.post('/api/products', headers=auth(user_id),
                       json={'name': 'Chair', 'price': 20})
    assert resp.status_code == 400
    assert resp.get_json() == {
        'success': False,
        'message': 'Vendor profile required to add products',
    }


def test_add_product_requires_login(client):
    resp = client.post('/api/products', json={'name': 'Chair', 'price': 20})
    assert resp.status_code == 401


def test_add_product_validates_payload(client, auth, vendor):
    owner_id, _ = vendor
    resp = client.post('/api/products', headers=auth(owner_id),
                       json={'name': '', 'price': -1})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['message'] == 'Invalid payload'
    assert set(body['error']) == {'name', 'price'}


def test_add_product_for_active_vendor(app, client, auth, vendor):
    owner_id, profile_id = vendor
    resp = client.post('/api/products', headers=auth(owner_id), json={
        'name': 'Oak table',
        'price': 149.5,
        'tags': ['wood', 'table'],
        'vendorLocation': 'Lagos',
    })
    assert resp.status_code == 201
    product = resp.get_json()['product']
    assert product['status'] == 'active'
    assert product['price'] == 149.5
    assert product['vendor_location'] == 'Lagos'
    assert product['vendor']['id'] == profile_id

    with app.app_context():
        assert db.session.get(BusinessProfile, profile_id).total_products == 1


def test_product_from_pending_vendor_waits_for_approval(
        client, auth, make_user, make_profile):
    owner_id = make_user()
    make_profile(owner_id, status=BusinessStatus.PENDING_VERIFICATION)
    resp = client.post('/api/products', headers=auth(owner_id),
                       json={'name': 'Lamp', 'price': 5})
    assert resp.status_code == 201
    assert resp.get_json()['product']['status'] == 'pending'


@pytest.mark.parametrize('status', [BusinessStatus.REJECTED,
                                    BusinessStatus.SUSPENDED])
def test_blocked_vendor_cannot_add_products(
        client, auth, make_user, make_profile, status):
    owner_id = make_user()
    make_profile(owner_id, status=status)
    resp = client.post('/api/products', headers=auth(owner_id),
                       json={'name': 'Lamp', 'price': 5})
    assert resp.status_code == 400


def test_add_product_with_unknown_category(client, auth, vendor):
    owner_id, _ = vendor
    resp = client.post('/api/products', headers=auth(owner_id), json={
        'name': 'Lamp', 'price': 5, 'categoryId': 'missing'})
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Category not found'


def test_list_only_shows_active_products(client, vendor, make_product):
    _, profile_id = vendor
    make_product(profile_id, name='Visible')
    make_product(profile_id, name='Hidden', status=ProductStatus.PENDING)
    make_product(profile_id, name='Gone', status=ProductStatus.DELETED)

    body = client.get('/api/products').get_json()
    assert [p['name'] for p in body['products']] == ['Visible']
    assert body['total'] == 1
    assert body['products'][0]['vendor']['id'] == profile_id
    assert 'business_phone' not in body['products'][0]['vendor']


def test_list_pagination_envelope(client, vendor, make_product):
    _, profile_id = vendor
    for i in range(5):
        make_product(profile_id, name=f'Item {i}', price=i + 1)

    body = client.get('/api/products?page=2&limit=2&sort=price_asc').get_json()
    assert body['page'] == 2
    assert body['limit'] == 2
    assert body['total'] == 5
    assert body['totalPages'] == 3
    assert [p['price'] for p in body['products']] == [3.0, 4.0]


def test_list_accepts_per_page_alias(client, vendor, make_product):
    _, profile_id = vendor
    for i in range(3):
        make_product(profile_id, name=f'Item {i}')
    body = client.get('/api/products?perPage=1').get_json()
    assert body['limit'] == 1
    assert body['totalPages'] == 3


def test_list_filters(client, vendor, make_product, make_category):
    _, profile_id = vendor
    seating = make_category('Seating')
    make_product(profile_id, name='Red chair', price=20, tags=['red'],
                 category_id=seating, vendor_location='Abuja')
    make_product(profile_id, name='Blue sofa', price=300, tags=['blue'],
                 description='Comfortable chair for two')

    def names(query):
        body = client.get('/api/products' + query).get_json()
        return sorted(p['name'] for p in body['products'])

    assert names(f'?category={seating}') == ['Red chair']
    assert names('?tag=blue') == ['Blue sofa']
    assert names('?minPrice=100') == ['Blue sofa']
    assert names('?maxPrice=100') == ['Red chair']
    assert names('?vendorLocation=abu') == ['Red chair']
    assert names('?q=chair') == ['Blue sofa', 'Red chair']


def test_get_product_hides_contact_from_anonymous(client, vendor,
                                                  make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)

    body = client.get(f'/api/products/{product_id}').get_json()
    vendor_data = body['product']['vendor']
    assert vendor_data['id'] == profile_id
    assert vendor_data['address'] == '12 Market Street'
    for field in ('business_phone', 'business_whatsapp_number',
                  'business_email'):
        assert field not in vendor_data


def test_get_product_shows_contact_to_authenticated(
        client, auth, make_user, vendor, make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    viewer = make_user()

    body = client.get(f'/api/products/{product_id}',
                      headers=auth(viewer)).get_json()
    assert body['product']['vendor']['business_phone'] == '+100200300'


def test_get_missing_product(client):
    resp = client.get('/api/products/nope')
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'Product not found'


def test_owner_updates_product(client, auth, vendor, make_product):
    owner_id, profile_id = vendor
    product_id = make_product(profile_id)
    resp = client.patch(f'/api/products/{product_id}', headers=auth(owner_id),
                        json={'price': 25, 'tags': ['sale']})
    assert resp.status_code == 200
    product = resp.get_json()['product']
    assert product['price'] == 25.0
    assert product['tags'] == ['sale']
    assert product['name'] == 'Chair'


def test_other_user_cannot_update_product(client, auth, make_user, vendor,
                                          make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    stranger = make_user()
    resp = client.patch(f'/api/products/{product_id}', headers=auth(stranger),
                        json={'price': 1})
    assert resp.status_code == 403


def test_admin_can_update_any_product(client, auth, admin_id, vendor,
                                      make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    resp = client.patch(f'/api/products/{product_id}', headers=auth(admin_id),
                        json={'name': 'Armchair'})
    assert resp.status_code == 200
    assert resp.get_json()['product']['name'] == 'Armchair'


def test_update_with_no_fields(client, auth, vendor, make_product):
    owner_id, profile_id = vendor
    product_id = make_product(profile_id)
    resp = client.patch(f'/api/products/{product_id}', headers=auth(owner_id),
                        json={'unknown': 1})
    assert resp.status_code == 400


def test_delete_is_soft(app, client, auth, vendor, make_product):
    owner_id, profile_id = vendor
    product_id = make_product(profile_id)
    with app.app_context():
        db.session.get(BusinessProfile, profile_id).total_products = 1
        db.session.commit()

    resp = client.delete(f'/api/products/{product_id}',
                         headers=auth(owner_id))
    assert resp.status_code == 200
    assert resp.get_json()['message'] == 'Product soft-deleted'

    with app.app_context():
        product = db.session.get(Product, product_id)
        assert product is not None
        assert product.status == ProductStatus.DELETED
        assert db.session.get(BusinessProfile, profile_id).total_products == 0

    body = client.get('/api/products').get_json()
    assert body['total'] == 0


def test_contact_view_records_and_counts(app, client, auth, make_user,
                                         vendor, make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    viewer = make_user()

    for _ in range(2):
        resp = client.post(f'/api/products/{product_id}/contact-view',
                           headers=auth(viewer))
        assert resp.status_code == 200

    assert resp.get_json()['contact'] == {
        'phone': '+100200300',
        'whatsapp': '+100200301',
        'email': f'{vendor[0]}@shop.test',
        'address': '12 Market Street',
    }
    with app.app_context():
        assert db.session.get(Product, product_id).views_count == 2
        views = ProductContactView.query.filter_by(product_id=product_id)
        assert views.count() == 2
        assert views.first().user_id == viewer


def test_contact_view_requires_login(client, vendor, make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    resp = client.post(f'/api/products/{product_id}/contact-view')
    assert resp.status_code == 401



def test_tag_filter_matches_non_ascii_tags(client, vendor, make_product):
    _, profile_id = vendor
    make_product(profile_id, name='Straw hat', tags=['été'])
    make_product(profile_id, name='Sandals', tags=['summer'])

    body = client.get('/api/products', query_string={'tag': 'été'}).get_json()
    assert [p['name'] for p in body['products']] == ['Straw hat']
    body = client.get('/api/products?tag=summer').get_json()
    assert [p['name'] for p in body['products']] == ['Sandals']


def test_search_terms_are_literal(client, vendor, make_product):
    _, profile_id = vendor
    make_product(profile_id, name='100% cotton shirt')
    make_product(profile_id, name='Wool shirt', tags=['a_b'])

    body = client.get('/api/products', query_string={'q': '%'}).get_json()
    assert [p['name'] for p in body['products']] == ['100% cotton shirt']
    body = client.get('/api/products', query_string={'tag': 'a%'}).get_json()
    assert body['total'] == 0


def test_add_product_with_deleted_category(client, auth, vendor,
                                           make_category):
    owner_id, _ = vendor
    retired = make_category('Retired', status=CategoryStatus.DELETED)
    resp = client.post('/api/products', headers=auth(owner_id), json={
        'name': 'Lamp', 'price': 5, 'categoryId': retired})
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Category not found'


def test_other_user_cannot_delete_product(app, client, auth, make_user,
                                          vendor, make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    resp = client.delete(f'/api/products/{product_id}',
                         headers=auth(make_user()))
    assert resp.status_code == 403

    with app.app_context():
        assert db.session.get(Product, product_id).status == (
            ProductStatus.ACTIVE)


def test_admin_can_delete_any_product(app, client, auth, admin_id, vendor,
                                      make_product):
    _, profile_id = vendor
    product_id = make_product(profile_id)
    resp = client.delete(f'/api/products/{product_id}',
                         headers=auth(admin_id))
    assert resp.status_code == 200

    with app.app_context():
        assert db.session.get(Product, product_id).status == (
            ProductStatus.DELETED)
