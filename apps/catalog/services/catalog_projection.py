"""
Read side of the catalog: canonical nested documents for products and
their option trees, always in the same deterministic order.
"""

from django.db.models import Prefetch

from apps.catalog.api.serializers import OptionTreeSerializer, ProductDetailSerializer
from apps.catalog.models import OptionVariant, Product, ProductMedia, ProductOption


def option_queryset():
    return ProductOption.objects.order_by('id').prefetch_related(
        Prefetch('variants', queryset=OptionVariant.objects.order_by('id'))
    )


def product_queryset():
    return Product.objects.prefetch_related(
        Prefetch('options', queryset=option_queryset()),
        Prefetch('media', queryset=ProductMedia.objects.order_by('order', 'id')),
        'categories',
    )


def project_options(product):
    """Options of `product` (by id) with their variants (by id)."""
    options = option_queryset().filter(product=product)
    return OptionTreeSerializer(options, many=True).data


def project_product(product_id):
    product = product_queryset().get(pk=product_id)
    return ProductDetailSerializer(product).data
