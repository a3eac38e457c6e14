import pytest
from django.core.management import call_command

from apps.catalog.models import Category, Product, ProductMedia


@pytest.mark.django_db
def test_seed_catalog_creates_sample_data():
    call_command('seed_catalog')

    shirt = Product.objects.get(sku='TSH-BASIC')
    assert list(shirt.options.values_list('option_name', flat=True)) == ['Color', 'Size']
    assert shirt.options.get(option_name='Size').variants.count() == 4
    assert ProductMedia.objects.filter(product=shirt, is_default=True).count() == 1
    assert shirt.categories.get().full_path == 'Apparel > T-Shirts'


@pytest.mark.django_db
def test_seed_catalog_is_rerunnable():
    call_command('seed_catalog')
    call_command('seed_catalog')

    assert Product.objects.count() == 3
    assert Category.objects.count() == 6
