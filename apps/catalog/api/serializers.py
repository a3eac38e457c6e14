import json
from decimal import Decimal

from rest_framework import serializers
from apps.catalog.models import (
    Product,
    ProductOption,
    OptionVariant,
    ProductMedia,
    Category,
    PriceHistory,
)


def price_field(**kwargs):
    kwargs.setdefault('required', False)
    kwargs.setdefault('allow_null', True)
    return serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.00'), **kwargs
    )


class SaleWindowMixin:
    """Rejects a sale window whose end precedes its start."""

    def validate(self, attrs):
        attrs = super().validate(attrs)
        instance = getattr(self, 'instance', None)
        sale_start = attrs.get('sale_start', getattr(instance, 'sale_start', None))
        sale_end = attrs.get('sale_end', getattr(instance, 'sale_end', None))
        if sale_start and sale_end and sale_end < sale_start:
            raise serializers.ValidationError({
                'sale_end': 'Sale end must not be earlier than sale start.'
            })
        return attrs


# =============================================================================
# Option Tree Serializers (read)
# =============================================================================

class VariantSerializer(serializers.ModelSerializer):
    variant_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = OptionVariant
        fields = [
            'variant_id', 'variant_name', 'sku', 'price', 'sale_price',
            'sale_start', 'sale_end', 'media'
        ]


class OptionTreeSerializer(serializers.ModelSerializer):
    """Canonical option with its variants, as returned after reconciliation."""
    option_id = serializers.IntegerField(source='id', read_only=True)
    variants = VariantSerializer(many=True, read_only=True)

    class Meta:
        model = ProductOption
        fields = ['option_id', 'option_name', 'variants']


class MediaItemReadSerializer(serializers.ModelSerializer):
    default = serializers.BooleanField(source='is_default', read_only=True)

    class Meta:
        model = ProductMedia
        fields = ['id', 'media_id', 'url', 'title', 'default', 'order']


# =============================================================================
# Submission Serializers (validation of full-state documents)
# =============================================================================

class VariantSubmissionSerializer(SaleWindowMixin, serializers.Serializer):
    variant_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    variant_name = serializers.CharField(max_length=255)
    sku = serializers.CharField(max_length=100)
    price = price_field()
    sale_price = price_field()
    sale_start = serializers.DateTimeField(required=False, allow_null=True)
    sale_end = serializers.DateTimeField(required=False, allow_null=True)
    media = serializers.CharField(
        max_length=2048, required=False, allow_blank=True, allow_null=True
    )


class OptionSubmissionSerializer(serializers.Serializer):
    option_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    option_name = serializers.CharField(max_length=255)
    variants = VariantSubmissionSerializer(many=True, required=False)


class MediaItemSerializer(serializers.Serializer):
    # `order` and `id` may be echoed back by clients; the array index decides order
    media_id = serializers.CharField(
        max_length=64, required=False, allow_blank=True, allow_null=True
    )
    url = serializers.CharField(max_length=2048)
    title = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    default = serializers.BooleanField(required=False, default=False)


class MediaListField(serializers.ListField):
    """List of media items, also accepted as a JSON-encoded string."""
    default_error_messages = {
        'invalid_json': 'Expected a JSON array of media items.',
    }

    def __init__(self, **kwargs):
        kwargs.setdefault('child', MediaItemSerializer())
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            try:
                data = json.loads(data) if data.strip() else []
            except ValueError:
                self.fail('invalid_json')
        return super().to_internal_value(data)


# =============================================================================
# Product Serializers
# =============================================================================

class ProductWriteSerializer(SaleWindowMixin, serializers.ModelSerializer):
    """
    Validates product create/update payloads.
    Nested `options` and `product_media` are full-state documents and are
    reconciled by CatalogSyncService, not saved by this serializer.
    """
    price = price_field()
    sale_price = price_field()
    options = OptionSubmissionSerializer(many=True, required=False)
    product_media = MediaListField(required=False)
    category_ids = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), many=True, required=False
    )

    class Meta:
        model = Product
        fields = [
            'name', 'sku', 'description', 'price', 'sale_price',
            'sale_start', 'sale_end', 'options', 'product_media', 'category_ids'
        ]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if not self.partial and attrs.get('price') is None:
            raise serializers.ValidationError({'price': 'This field is required.'})
        return attrs


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'full_path']


class ProductListSerializer(serializers.ModelSerializer):
    """Product list with counts."""
    option_count = serializers.IntegerField(read_only=True)
    is_on_sale = serializers.BooleanField(read_only=True)
    default_media = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'price', 'sale_price', 'sale_start', 'sale_end',
            'is_on_sale', 'option_count', 'default_media',
            'created_at', 'updated_at'
        ]

    def get_default_media(self, obj):
        # Uses the prefetched media list
        for media in obj.media.all():
            if media.is_default:
                return media.url
        return None


class ProductDetailSerializer(serializers.ModelSerializer):
    """Canonical product: fields, options with variants, ordered media."""
    is_on_sale = serializers.BooleanField(read_only=True)
    categories = CategorySummarySerializer(many=True, read_only=True)
    options = OptionTreeSerializer(many=True, read_only=True)
    product_media = MediaItemReadSerializer(source='media', many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'description', 'price', 'sale_price',
            'sale_start', 'sale_end', 'is_on_sale', 'categories',
            'options', 'product_media', 'created_at', 'updated_at'
        ]


class CategoryAssignmentSerializer(serializers.Serializer):
    category_ids = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), many=True
    )


# =============================================================================
# Option / Variant Serializers (individual CRUD)
# =============================================================================

class ProductOptionSerializer(serializers.ModelSerializer):
    variants = VariantSerializer(many=True, read_only=True)

    class Meta:
        model = ProductOption
        fields = ['id', 'product', 'option_name', 'variants', 'created_at', 'updated_at']

    def validate_product(self, value):
        if self.instance is not None and value != self.instance.product:
            raise serializers.ValidationError('An option cannot be moved to another product.')
        return value


class OptionVariantSerializer(SaleWindowMixin, serializers.ModelSerializer):
    price = price_field()
    sale_price = price_field()
    is_on_sale = serializers.BooleanField(read_only=True)
    effective_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    discount_percentage = serializers.IntegerField(read_only=True)

    class Meta:
        model = OptionVariant
        fields = [
            'id', 'option', 'variant_name', 'sku', 'price', 'sale_price',
            'sale_start', 'sale_end', 'media', 'is_on_sale', 'effective_price',
            'discount_percentage', 'created_at', 'updated_at'
        ]
        read_only_fields = ['option']


# =============================================================================
# Category Serializer
# =============================================================================

class CategorySerializer(serializers.ModelSerializer):
    full_path = serializers.CharField(read_only=True)
    product_count = serializers.IntegerField(source='products.count', read_only=True)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'description', 'parent', 'full_path',
            'product_count', 'created_at', 'updated_at'
        ]

    def validate_parent(self, value):
        if value is None or self.instance is None:
            return value
        if value == self.instance or value in self.instance.get_descendants():
            raise serializers.ValidationError('A category cannot be nested under itself.')
        return value


# =============================================================================
# Price History Serializer
# =============================================================================

class PriceHistorySerializer(serializers.ModelSerializer):
    variant_sku = serializers.CharField(source='variant.sku', read_only=True)
    price_difference = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    percentage_change = serializers.FloatField(read_only=True)

    class Meta:
        model = PriceHistory
        fields = [
            'id', 'variant', 'variant_sku', 'change_type',
            'old_price', 'new_price', 'price_difference', 'percentage_change',
            'changed_by', 'changed_at', 'notes'
        ]
