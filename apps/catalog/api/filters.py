from django_filters import rest_framework as filters
from rest_framework.exceptions import ValidationError
from rest_framework.filters import BaseFilterBackend

from apps.catalog.models import Product, OptionVariant, PriceHistory
from apps.catalog.models.product import on_sale_q


class ProductFilter(filters.FilterSet):
    """Filter for products by price, sale state and category."""

    # Price filters
    min_price = filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = filters.NumberFilter(field_name='price', lookup_expr='lte')

    on_sale = filters.BooleanFilter(method='filter_on_sale')
    category = filters.NumberFilter(field_name='categories__id', distinct=True)
    sku = filters.CharFilter(field_name='sku', lookup_expr='iexact')

    class Meta:
        model = Product
        fields = ['sku', 'category']

    def filter_on_sale(self, queryset, name, value):
        if value is None:
            return queryset
        active = on_sale_q()
        if value:
            return queryset.filter(active)
        return queryset.exclude(active)


class OptionVariantFilter(filters.FilterSet):
    min_price = filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = filters.NumberFilter(field_name='price', lookup_expr='lte')

    class Meta:
        model = OptionVariant
        fields = ['sku']


class PriceHistoryFilter(filters.FilterSet):
    product = filters.NumberFilter(field_name='variant__option__product__id')

    class Meta:
        model = PriceHistory
        fields = ['variant', 'change_type', 'changed_by']


class ProductOrderingFilter(BaseFilterBackend):
    """
    Orders by `orderBy` (one of `ordering_fields`) in `order` direction.
    Unknown values are rejected instead of silently ignored.
    """
    order_by_param = 'orderBy'
    direction_param = 'order'

    def filter_queryset(self, request, queryset, view):
        allowed = getattr(view, 'ordering_fields', [])
        order_by = request.query_params.get(self.order_by_param)
        direction = request.query_params.get(self.direction_param, 'asc').lower()

        errors = {}
        if order_by is not None and order_by not in allowed:
            errors[self.order_by_param] = [f'Must be one of: {", ".join(allowed)}.']
        if direction not in ('asc', 'desc'):
            errors[self.direction_param] = ['Must be "asc" or "desc".']
        if errors:
            raise ValidationError(errors)

        if order_by is None:
            return queryset.order_by(*getattr(view, 'ordering', ['id']))
        prefix = '-' if direction == 'desc' else ''
        return queryset.order_by(f'{prefix}{order_by}', f'{prefix}id')
