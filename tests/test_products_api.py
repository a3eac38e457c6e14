import json
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.catalog.models import Category, OptionVariant, Product, ProductMedia, ProductOption


@pytest.mark.django_db
def test_create_product_with_options_and_media(auth_client):
    payload = {
        'name': 'Hoodie',
        'sku': 'HOOD-1',
        'price': '99.90',
        'options': [{'option_name': 'Size', 'variants': [
            {'variant_name': 'M', 'sku': 'HOOD-M', 'price': '99.90'},
        ]}],
        'product_media': [
            {'url': 'https://cdn/h1.jpg', 'default': True},
            {'url': 'https://cdn/h2.jpg', 'default': True},
        ],
    }

    response = auth_client.post('/v1/products/', payload, format='json')

    assert response.status_code == 201
    body = response.json()
    assert body['sku'] == 'HOOD-1'
    assert body['price'] == '99.90'
    assert body['options'][0]['option_name'] == 'Size'
    assert body['options'][0]['variants'][0]['sku'] == 'HOOD-M'
    assert [(m['order'], m['default']) for m in body['product_media']] == [(0, False), (1, True)]
    assert all(m['media_id'] for m in body['product_media'])


@pytest.mark.django_db
def test_create_reports_assigned_ids(auth_client):
    payload = {
        'name': 'Cap',
        'sku': 'CAP-1',
        'price': '19.90',
        'options': [{'option_name': 'Color', 'variants': [
            {'variant_name': 'Black', 'sku': 'CAP-BLK'},
        ]}],
        'product_media': [{'media_id': 'front', 'url': 'https://cdn/cap.jpg'}],
    }

    response = auth_client.post('/v1/products/', payload, format='json')

    assert response.status_code == 201
    body = response.json()
    option = ProductOption.objects.get(product_id=body['id'])
    assert body['created'] == {
        'options': {'0': option.pk},
        'variants': {'0.0': option.variants.get().pk},
        'media': {'front': body['product_media'][0]['id']},
    }


@pytest.mark.django_db
def test_create_requires_name_sku_and_price(auth_client):
    response = auth_client.post('/v1/products/', {'description': 'no fields'}, format='json')

    assert response.status_code == 422
    fields = {error['field'] for error in response.json()['error']}
    assert {'name', 'sku'} <= fields


@pytest.mark.django_db
def test_create_without_price_is_rejected(auth_client):
    response = auth_client.post('/v1/products/', {'name': 'Cap', 'sku': 'CAP'}, format='json')

    assert response.status_code == 422
    assert response.json()['error'] == [{'field': 'price', 'message': 'This field is required.'}]


@pytest.mark.django_db
def test_duplicate_sku_is_rejected(auth_client, product):
    response = auth_client.post(
        '/v1/products/', {'name': 'Copy', 'sku': product.sku, 'price': '1.00'}, format='json'
    )

    assert response.status_code == 422
    assert response.json()['error'][0]['field'] == 'sku'


@pytest.mark.django_db
def test_retrieve_returns_canonical_product(auth_client, product, color):
    response = auth_client.get(f'/v1/products/{product.pk}/')

    assert response.status_code == 200
    body = response.json()
    assert body['options'][0]['option_id'] == color.pk
    assert [m['media_id'] for m in body['product_media']] == ['a', 'b']
    assert [m['default'] for m in body['product_media']] == [True, False]


@pytest.mark.django_db
def test_put_reconciles_media_by_media_id(auth_client, product):
    media_a = ProductMedia.objects.get(product=product, media_id='a')
    payload = {
        'name': 'T-Shirt',
        'sku': 'TSH-1',
        'price': '10.00',
        'product_media': [
            {'media_id': 'b', 'url': 'https://cdn/b.jpg', 'default': True},
            {'media_id': 'a', 'url': 'https://cdn/a.jpg', 'default': False},
            {'media_id': 'c', 'url': 'https://cdn/c.jpg', 'default': True},
        ],
    }

    response = auth_client.put(f'/v1/products/{product.pk}/', payload, format='json')

    assert response.status_code == 200
    media = response.json()['product_media']
    assert [(m['media_id'], m['order'], m['default']) for m in media] == [
        ('b', 0, False),
        ('a', 1, False),
        ('c', 2, True),
    ]
    assert media[1]['id'] == media_a.pk
    assert ProductMedia.objects.filter(product=product, is_default=True).count() == 1


@pytest.mark.django_db
def test_product_media_may_be_a_json_string(auth_client, product):
    media = json.dumps([{'media_id': 'z', 'url': 'https://cdn/z.jpg', 'default': True}])

    response = auth_client.patch(
        f'/v1/products/{product.pk}/', {'product_media': media}, format='json'
    )

    assert response.status_code == 200
    assert [m['media_id'] for m in response.json()['product_media']] == ['z']


@pytest.mark.django_db
def test_duplicate_media_id_is_rejected(auth_client, product):
    payload = {'product_media': [
        {'media_id': 'a', 'url': 'https://cdn/1.jpg'},
        {'media_id': 'a', 'url': 'https://cdn/2.jpg'},
    ]}

    response = auth_client.patch(f'/v1/products/{product.pk}/', payload, format='json')

    assert response.status_code == 422
    assert ProductMedia.objects.filter(product=product).count() == 2


@pytest.mark.django_db
def test_patch_without_media_leaves_media_untouched(auth_client, product):
    response = auth_client.patch(f'/v1/products/{product.pk}/', {'name': 'Tee'}, format='json')

    assert response.status_code == 200
    assert response.json()['name'] == 'Tee'
    assert len(response.json()['product_media']) == 2


@pytest.mark.django_db
def test_delete_cascades(auth_client, product, color):
    response = auth_client.delete(f'/v1/products/{product.pk}/')

    assert response.status_code == 204
    assert not Product.objects.filter(pk=product.pk).exists()
    assert not ProductOption.objects.filter(pk=color.pk).exists()
    assert not OptionVariant.objects.filter(option_id=color.pk).exists()
    assert not ProductMedia.objects.filter(product_id=product.pk).exists()


@pytest.mark.django_db
def test_list_is_paginated_and_ordered(auth_client):
    for i in range(3):
        Product.objects.create(name=f'P{i}', sku=f'SKU-{i}', price=10 + i)

    response = auth_client.get('/v1/products/', {'limit': 2, 'orderBy': 'price', 'order': 'desc'})

    assert response.status_code == 200
    body = response.json()
    assert body['count'] == 3
    assert [p['sku'] for p in body['results']] == ['SKU-2', 'SKU-1']


@pytest.mark.django_db
def test_list_rejects_unknown_order_field(auth_client):
    response = auth_client.get('/v1/products/', {'orderBy': 'password'})

    assert response.status_code == 422
    assert response.json()['error'][0]['field'] == 'orderBy'


@pytest.mark.django_db
def test_put_reports_only_new_media(auth_client, product):
    payload = {
        'name': 'T-Shirt',
        'sku': 'TSH-1',
        'price': '10.00',
        'product_media': [
            {'media_id': 'a', 'url': 'https://cdn/a.jpg', 'default': True},
            {'media_id': 'c', 'url': 'https://cdn/c.jpg'},
        ],
    }

    response = auth_client.put(f'/v1/products/{product.pk}/', payload, format='json')

    assert response.status_code == 200
    created = ProductMedia.objects.get(product=product, media_id='c')
    assert response.json()['created']['media'] == {'c': created.pk}


@pytest.mark.django_db
def test_list_filters_by_active_sale_window(auth_client):
    now = timezone.now()
    day = timedelta(days=1)
    Product.objects.create(name='Open', sku='OPEN', price=10, sale_price=Decimal('8.00'))
    Product.objects.create(
        name='Running', sku='RUN', price=10, sale_price=Decimal('8.00'),
        sale_start=now - day, sale_end=now + day,
    )
    Product.objects.create(
        name='Upcoming', sku='SOON', price=10, sale_price=Decimal('8.00'), sale_start=now + day,
    )
    Product.objects.create(
        name='Expired', sku='PAST', price=10, sale_price=Decimal('8.00'), sale_end=now - day,
    )
    Product.objects.create(name='Regular', sku='REG', price=10)

    on_sale = auth_client.get('/v1/products/', {'on_sale': 'true', 'orderBy': 'id'})
    not_on_sale = auth_client.get('/v1/products/', {'on_sale': 'false', 'orderBy': 'id'})

    assert [p['sku'] for p in on_sale.json()['results']] == ['OPEN', 'RUN']
    assert [p['sku'] for p in not_on_sale.json()['results']] == ['SOON', 'PAST', 'REG']


@pytest.mark.django_db
def test_list_search(auth_client, product):
    Product.objects.create(name='Jeans', sku='JNS', price=50)

    response = auth_client.get('/v1/products/', {'search': 'shirt'})

    assert [p['sku'] for p in response.json()['results']] == ['TSH-1']


@pytest.mark.django_db
def test_assign_categories(auth_client, product):
    shirts = Category.objects.create(name='Shirts')
    sale = Category.objects.create(name='Sale')

    response = auth_client.put(
        f'/v1/products/{product.pk}/categories/',
        {'category_ids': [shirts.pk, sale.pk]},
        format='json',
    )

    assert response.status_code == 200
    assert {c['name'] for c in response.json()['categories']} == {'Shirts', 'Sale'}

    auth_client.put(f'/v1/products/{product.pk}/categories/', {'category_ids': [sale.pk]}, format='json')
    assert list(product.categories.values_list('name', flat=True)) == ['Sale']


@pytest.mark.django_db
def test_assign_unknown_category_is_rejected(auth_client, product):
    response = auth_client.put(
        f'/v1/products/{product.pk}/categories/', {'category_ids': [999]}, format='json'
    )

    assert response.status_code == 422
