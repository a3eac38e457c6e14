from decimal import Decimal

import pytest

from apps.catalog.models import Category, OptionVariant, PriceHistory, Product, ProductOption


@pytest.mark.django_db
def test_create_option_directly(auth_client, product):
    response = auth_client.post(
        '/v1/product-options/', {'product': product.pk, 'option_name': 'Size'}, format='json'
    )

    assert response.status_code == 201
    assert response.json()['variants'] == []
    assert product.options.filter(option_name='Size').exists()


@pytest.mark.django_db
def test_create_option_requires_name(auth_client, product):
    response = auth_client.post('/v1/product-options/', {'product': product.pk}, format='json')

    assert response.status_code == 422
    assert response.json()['error'][0]['field'] == 'option_name'


@pytest.mark.django_db
def test_option_cannot_change_product(auth_client, product, color):
    other = Product.objects.create(name='Other', sku='OTHER', price=1)

    response = auth_client.put(
        f'/v1/product-options/{color.pk}/',
        {'product': other.pk, 'option_name': 'Color'},
        format='json',
    )

    assert response.status_code == 422
    color.refresh_from_db()
    assert color.product_id == product.pk


@pytest.mark.django_db
def test_list_options_filtered_by_product(auth_client, product, color):
    other = Product.objects.create(name='Other', sku='OTHER', price=1)
    ProductOption.objects.create(product=other, option_name='Size')

    response = auth_client.get('/v1/product-options/', {'product': product.pk})

    assert [o['id'] for o in response.json()['results']] == [color.pk]


@pytest.mark.django_db
def test_delete_option_removes_its_variants(auth_client, color, red):
    response = auth_client.delete(f'/v1/product-options/{color.pk}/')

    assert response.status_code == 204
    assert not OptionVariant.objects.filter(pk=red.pk).exists()


@pytest.mark.django_db
def test_create_variant_under_option(auth_client, color):
    response = auth_client.post(
        f'/v1/product-options/{color.pk}/variants/',
        {'variant_name': 'Green', 'sku': 'G', 'price': '9.99'},
        format='json',
    )

    assert response.status_code == 201
    body = response.json()
    assert body['option'] == color.pk
    assert body['price'] == '9.99'


@pytest.mark.django_db
def test_variant_under_unknown_option_is_404(auth_client):
    response = auth_client.get('/v1/product-options/999/variants/')

    assert response.status_code == 404


@pytest.mark.django_db
def test_variant_is_scoped_to_its_option(auth_client, product, red):
    size = ProductOption.objects.create(product=product, option_name='Size')

    response = auth_client.get(f'/v1/product-options/{size.pk}/variants/{red.pk}/')

    assert response.status_code == 404


@pytest.mark.django_db
def test_updating_variant_price_writes_history(auth_client, color, red):
    response = auth_client.patch(
        f'/v1/product-options/{color.pk}/variants/{red.pk}/',
        {'price': '8.00', 'sale_price': '6.00'},
        format='json',
    )

    assert response.status_code == 200
    changes = {h.change_type: h for h in PriceHistory.objects.filter(variant=red)}
    assert changes['price'].old_price == Decimal('10.00')
    assert changes['price'].new_price == Decimal('8.00')
    assert changes['sale'].old_price is None
    assert changes['price'].changed_by == '7'

    history = auth_client.get('/v1/price-history/', {'variant': red.pk}).json()
    assert history['count'] == 2
    assert {row['change_type'] for row in history['results']} == {'price', 'sale'}


@pytest.mark.django_db
def test_negative_variant_price_is_rejected(auth_client, color, red):
    response = auth_client.patch(
        f'/v1/product-options/{color.pk}/variants/{red.pk}/', {'price': '-5'}, format='json'
    )

    assert response.status_code == 422


@pytest.mark.django_db
def test_price_history_is_read_only(auth_client):
    response = auth_client.post('/v1/price-history/', {}, format='json')

    assert response.status_code == 405


@pytest.mark.django_db
def test_category_crud(auth_client):
    created = auth_client.post(
        '/v1/product-categories/', {'name': 'Apparel', 'description': 'Clothes'}, format='json'
    )
    assert created.status_code == 201
    apparel_id = created.json()['id']

    child = auth_client.post(
        '/v1/product-categories/', {'name': 'Shirts', 'parent': apparel_id}, format='json'
    )
    assert child.json()['full_path'] == 'Apparel > Shirts'

    renamed = auth_client.put(
        f'/v1/product-categories/{apparel_id}/', {'name': 'Clothing'}, format='json'
    )
    assert renamed.status_code == 200
    assert Category.objects.get(pk=child.json()['id']).full_path == 'Clothing > Shirts'

    deleted = auth_client.delete(f'/v1/product-categories/{apparel_id}/')
    assert deleted.status_code == 204
    assert Category.objects.get(pk=child.json()['id']).parent is None


@pytest.mark.django_db
def test_category_name_is_unique(auth_client):
    Category.objects.create(name='Apparel')

    response = auth_client.post('/v1/product-categories/', {'name': 'Apparel'}, format='json')

    assert response.status_code == 422


@pytest.mark.django_db
def test_category_cannot_be_nested_under_descendant(auth_client):
    root = Category.objects.create(name='Root')
    leaf = Category.objects.create(name='Leaf', parent=root)

    response = auth_client.patch(
        f'/v1/product-categories/{root.pk}/', {'parent': leaf.pk}, format='json'
    )

    assert response.status_code == 422
