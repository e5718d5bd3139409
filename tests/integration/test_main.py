"""
Integration tests for health, CSRF and metrics endpoints.
"""


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['database'] == 'connected'


def test_cache_health_degraded_without_redis(client):
    response = client.get('/health/cache')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'degraded'


def test_metrics(client):
    client.post('/cart/add', json={'offering_id': 'seo-basic'})
    response = client.get('/metrics')
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert 'storefront_cart_mutations_total' in body
    assert 'http_requests_total' in body


def test_unknown_route_is_json(client):
    response = client.get('/nowhere')
    assert response.status_code == 404
    assert response.get_json()['status'] == 'error'


def test_csrf_enforced_on_posts(app, client):
    app.config['WTF_CSRF_ENABLED'] = True
    try:
        response = client.post('/cart/add', json={'offering_id': 'seo-basic'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'csrf'

        token = client.get('/csrf-token').get_json()['csrf_token']
        response = client.post('/cart/add', json={'offering_id': 'seo-basic'},
                               headers={'X-CSRFToken': token})
        assert response.status_code == 200
    finally:
        app.config['WTF_CSRF_ENABLED'] = False
