from decimal import Decimal

import pytest
from django.conf import settings
from jose import jwt
from rest_framework.test import APIClient

from apps.catalog.models import Product, ProductOption, OptionVariant, ProductMedia


def make_token(admin_id=7, role='Admin', **claims):
    payload = {'adminId': admin_id, 'adminRoleName': role, **claims}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(api_client):
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token()}')
    return api_client


@pytest.fixture
def product(db):
    """Product with option Color (Red, Blue) and media A (default) and B."""
    product = Product.objects.create(name='T-Shirt', sku='TSH-1', price=Decimal('10.00'))
    color = ProductOption.objects.create(product=product, option_name='Color')
    OptionVariant.objects.create(option=color, variant_name='Red', sku='R', price=Decimal('10.00'))
    OptionVariant.objects.create(option=color, variant_name='Blue', sku='B', price=Decimal('12.00'))
    ProductMedia.objects.create(product=product, media_id='a', url='https://cdn/a.jpg', is_default=True, order=0)
    ProductMedia.objects.create(product=product, media_id='b', url='https://cdn/b.jpg', order=1)
    return product


@pytest.fixture
def color(product):
    return product.options.get(option_name='Color')


@pytest.fixture
def red(color):
    return color.variants.get(variant_name='Red')


@pytest.fixture
def blue(color):
    return color.variants.get(variant_name='Blue')
