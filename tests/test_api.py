from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_requests_without_token_are_rejected(client, seed):
    response = client.get('/v1/product')
    assert response.status_code == 401
    assert response.get_json() == {'status': 401, 'message': 'Please authenticate', 'data': None}


def test_invalid_token_is_rejected(client, seed):
    response = client.get('/v1/product', headers={'Authorization': 'Bearer not-a-token'})
    assert response.status_code == 401


def test_login_returns_usable_token(client, seed):
    response = client.post('/v1/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    body = response.get_json()
    assert response.status_code == 200
    assert body['data']['user']['email'] == ADMIN_EMAIL
    assert 'password_hash' not in body['data']['user']

    token = body['data']['token']
    response = client.get('/v1/category', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 200
    assert [c['name'] for c in response.get_json()['data']] == ['Electronics']


def test_login_with_wrong_password(client, seed):
    response = client.post('/v1/auth/login', json={'email': ADMIN_EMAIL, 'password': 'nope'})
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Incorrect email or password'


def test_register_creates_plain_user(client, seed):
    response = client.post('/v1/auth/register', json={
        'name': 'New', 'email': 'new@example.com', 'password': 'new-secret', 'role': 'admin',
    })
    assert response.status_code == 201
    assert response.get_json()['data']['user']['role'] == 'user'


def test_create_order_item_envelope(client, seed, user_headers):
    response = client.post('/v1/order-item', headers=user_headers, json={
        'order_id': seed['order_id'], 'product_id': seed['laptop_id'], 'quantity': 3, 'unit_price': 100000,
    })
    body = response.get_json()

    assert response.status_code == 201
    assert body['status'] == 201
    assert body['message'] == 'Create OrderItem Success'
    assert body['data']['quantity'] == 3

    product = client.get(f"/v1/product/{seed['laptop_id']}", headers=user_headers).get_json()['data']
    assert product['quantity_in_stock'] == 97
    assert product['category']['name'] == 'Electronics'


def test_create_order_item_insufficient_stock(client, seed, user_headers):
    response = client.post('/v1/order-item', headers=user_headers, json={
        'order_id': seed['order_id'], 'product_id': seed['laptop_id'], 'quantity': 101, 'unit_price': 1,
    })
    assert response.status_code == 400
    assert response.get_json() == {'status': 400, 'message': 'Insufficient stock', 'data': None}


def test_missing_entities_answer_404(client, seed, user_headers):
    response = client.get('/v1/order-item/missing', headers=user_headers)
    assert response.status_code == 404
    assert response.get_json()['message'] == 'OrderItem not found'

    response = client.post('/v1/order-item', headers=user_headers, json={
        'order_id': seed['order_id'], 'product_id': 'missing', 'quantity': 1, 'unit_price': 1,
    })
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Product not found'


def test_update_and_delete_order_item(client, seed, admin_headers):
    created = client.post('/v1/order-item', headers=admin_headers, json={
        'order_id': seed['order_id'], 'product_id': seed['mouse_id'], 'quantity': 2, 'unit_price': 250,
    }).get_json()['data']

    response = client.patch(f"/v1/order-item/{created['id']}", headers=admin_headers,
                            json={'quantity': 4, 'unit_price': 250})
    assert response.status_code == 200
    order = client.get(f"/v1/order/{seed['order_id']}", headers=admin_headers).get_json()['data']
    assert order['total_price'] == 1000

    response = client.delete(f"/v1/order-item/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['message'] == 'Delete OrderItem Success'
    order = client.get(f"/v1/order/{seed['order_id']}", headers=admin_headers).get_json()['data']
    assert order['total_price'] == 0


def test_orders_and_users_are_admin_only(client, seed, user_headers, admin_headers):
    for path in ('/v1/order', '/v1/user'):
        response = client.get(path, headers=user_headers)
        assert response.status_code == 403
        assert response.get_json()['message'] == 'Forbidden'

    response = client.get('/v1/order', headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['data'][0]['customer_name'] == 'Budi'


def test_create_order_and_delete_with_items(client, seed, admin_headers):
    response = client.post('/v1/order', headers=admin_headers, json={
        'date': '2024-07-01T08:00:00Z', 'customer_name': 'Rina', 'customer_email': 'rina@example.com',
    })
    assert response.status_code == 201
    order_id = response.get_json()['data']['id']

    client.post('/v1/order-item', headers=admin_headers, json={
        'order_id': order_id, 'product_id': seed['mouse_id'], 'quantity': 10, 'unit_price': 250,
    })
    response = client.delete(f'/v1/order/{order_id}', headers=admin_headers)
    assert response.status_code == 200

    product = client.get(f"/v1/product/{seed['mouse_id']}", headers=admin_headers).get_json()['data']
    assert product['quantity_in_stock'] == 100


def test_body_validation(client, seed, user_headers):
    response = client.patch(f"/v1/category/{seed['category_id']}", headers=user_headers, json={})
    assert response.status_code == 400
    assert response.get_json()['message'] == '"body" must have at least 1 key'

    response = client.get('/v1/product?take=-1', headers=user_headers)
    assert response.status_code == 400


def test_product_pagination_and_category_filter(client, seed, user_headers):
    response = client.get('/v1/product?skip=1&take=1', headers=user_headers)
    assert [p['name'] for p in response.get_json()['data']] == ['Mouse']

    response = client.get('/v1/product?category=Garden', headers=user_headers)
    assert response.get_json()['data'] == []


def test_unknown_api_route_answers_json_404(client, seed):
    response = client.get('/v1/nothing-here')
    assert response.status_code == 404
    assert response.get_json()['status'] == 404


def test_non_finite_unit_price_is_rejected(client, seed, user_headers):
    for unit_price in ('nan', 'inf'):
        response = client.post('/v1/order-item', headers=user_headers, json={
            'order_id': seed['order_id'], 'product_id': seed['laptop_id'], 'quantity': 1,
            'unit_price': unit_price,
        })
        assert response.status_code == 400
        assert response.get_json()['message'] == '"unit_price" must be a number'

    items = client.get('/v1/order-item', headers=user_headers).get_json()
    assert items['data'] == []
