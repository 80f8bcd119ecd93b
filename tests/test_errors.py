def test_unknown_route_returns_short_message(client):
    resp = client.get('/api/nope')
    assert resp.status_code == 404
    assert resp.get_json() == {'success': False, 'message': 'Not found'}


def test_wrong_method_returns_short_message(client):
    resp = client.put('/api/products')
    assert resp.status_code == 405
    assert resp.get_json() == {
        'success': False, 'message': 'Method not allowed'}


def test_health_route(client):
    assert client.get('/').get_json() == {
        'success': True, 'message': 'API is running'}
