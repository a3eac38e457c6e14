from decimal import Decimal

import pytest
from django.contrib.admin.sites import site
from django.contrib.auth import get_user_model
from django.test import Client, RequestFactory

from apps.catalog.admin import OptionVariantAdmin
from apps.catalog.models import OptionVariant, PriceHistory


@pytest.fixture
def staff_client(db):
    user = get_user_model().objects.create_superuser('staff', 'staff@example.com', 'secret')
    client = Client()
    client.force_login(user)
    return client


@pytest.mark.parametrize('model', [
    'product', 'productoption', 'optionvariant', 'category', 'pricehistory',
])
def test_changelist_renders(staff_client, product, model):
    response = staff_client.get(f'/admin/catalog/{model}/')

    assert response.status_code == 200


def test_product_change_page_shows_inlines(staff_client, product):
    response = staff_client.get(f'/admin/catalog/product/{product.pk}/change/')

    assert response.status_code == 200
    assert b'https://cdn/a.jpg' in response.content


def test_variant_admin_records_staff_price_change(db, red):
    user = get_user_model().objects.create_superuser('editor', 'editor@example.com', 'secret')
    request = RequestFactory().post('/admin/catalog/optionvariant/')
    request.user = user

    red.price = Decimal('99.00')
    OptionVariantAdmin(OptionVariant, site).save_model(request, red, form=None, change=True)

    assert PriceHistory.objects.get(variant=red).changed_by == f'staff:{user.pk}'
