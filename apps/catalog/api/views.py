import logging

from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.catalog.models import (
    Product,
    ProductOption,
    OptionVariant,
    ProductMedia,
    Category,
    PriceHistory,
)
from apps.catalog.services import CatalogSyncService, project_options, project_product
from apps.catalog.services.catalog_projection import option_queryset, product_queryset
from .filters import ProductFilter, ProductOrderingFilter, OptionVariantFilter, PriceHistoryFilter
from .serializers import (
    ProductWriteSerializer,
    ProductListSerializer,
    ProductDetailSerializer,
    OptionSubmissionSerializer,
    CategoryAssignmentSerializer,
    ProductOptionSerializer,
    OptionVariantSerializer,
    CategorySerializer,
    PriceHistorySerializer,
)

logger = logging.getLogger(__name__)


def actor_id(request):
    return getattr(request.user, 'admin_id', '') or ''


class ProductViewSet(viewsets.ModelViewSet):
    """
    API endpoint for products.

    list: Paginated products (page, limit, orderBy, order, search)
    retrieve: Canonical product with options, variants and media
    create: Create a product, optionally with options and product_media
    update: Replace product fields; product_media, when sent, is reconciled
    delete: Delete a product and everything it owns
    """
    queryset = Product.objects.all()
    lookup_value_regex = r'\d+'
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, ProductOrderingFilter]
    search_fields = ['name', 'sku', 'description']
    ordering_fields = ['id', 'name', 'price', 'sale_price', 'created_at', 'updated_at']
    ordering = ['id']

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        elif self.action in ('create', 'update', 'partial_update'):
            return ProductWriteSerializer
        elif self.action == 'option_tree':
            return OptionSubmissionSerializer
        elif self.action == 'set_categories':
            return CategoryAssignmentSerializer
        return ProductDetailSerializer

    def get_queryset(self):
        if self.action == 'list':
            return Product.objects.prefetch_related(
                'options',
                Prefetch('media', queryset=ProductMedia.objects.order_by('order', 'id')),
            )
        elif self.action == 'retrieve':
            return product_queryset()
        return super().get_queryset()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product, result = CatalogSyncService.create_product(
            serializer.validated_data, actor_id(request)
        )
        data = project_product(product.pk)
        data['created'] = result.as_dict()
        return Response(data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        product = self.get_object()
        serializer = self.get_serializer(product, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        result = CatalogSyncService.update_product(
            product, serializer.validated_data, actor_id(request)
        )
        data = project_product(product.pk)
        data['created'] = result.as_dict()
        return Response(data)

    def perform_destroy(self, instance):
        logger.info("Deleting product %s (%s)", instance.pk, instance.sku)
        instance.delete()

    @action(detail=True, methods=['get', 'put'], url_path='options')
    def option_tree(self, request, pk=None):
        """
        Get or replace the product's option tree.

        Expected payload for PUT (full state; anything absent is deleted):
        [
            {
                "option_id": 1,
                "option_name": "Color",
                "variants": [
                    {"variant_id": 10, "variant_name": "Red", "sku": "R", "price": "10.00"},
                    {"variant_name": "Green", "sku": "G", "price": "12.00"}
                ]
            }
        ]
        """
        product = self.get_object()
        if request.method == 'GET':
            return Response(project_options(product))

        payload = request.data
        if isinstance(payload, dict) and 'options' in payload:
            payload = payload['options']
        serializer = self.get_serializer(data=payload, many=True)
        serializer.is_valid(raise_exception=True)

        tree, created = CatalogSyncService.sync_options(
            product, serializer.validated_data, actor_id(request)
        )
        return Response({'options': tree, 'created': created})

    @action(detail=True, methods=['put'], url_path='categories')
    def set_categories(self, request, pk=None):
        """
        Replace the product's categories.

        Expected payload:
        {"category_ids": [1, 2]}
        """
        product = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        CatalogSyncService.assign_categories(
            product, serializer.validated_data['category_ids'], actor_id(request)
        )
        return Response(project_product(product.pk))


class ProductOptionViewSet(viewsets.ModelViewSet):
    """
    API endpoint for individual product options.
    """
    queryset = option_queryset().select_related('product')
    serializer_class = ProductOptionSerializer
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['product']
    search_fields = ['option_name']

    def perform_create(self, serializer):
        option = serializer.save()
        logger.info("Created option %s on product %s", option.pk, option.product_id)

    def perform_destroy(self, instance):
        logger.info("Deleting option %s of product %s", instance.pk, instance.product_id)
        instance.delete()


class OptionVariantViewSet(viewsets.ModelViewSet):
    """
    API endpoint for the variants of one option.
    """
    serializer_class = OptionVariantSerializer
    filterset_class = OptionVariantFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    search_fields = ['variant_name', 'sku']

    def get_option(self):
        if not hasattr(self, '_option'):
            self._option = get_object_or_404(ProductOption, pk=self.kwargs['option_pk'])
        return self._option

    def get_queryset(self):
        return OptionVariant.objects.filter(option=self.get_option()).order_by('id')

    def perform_create(self, serializer):
        variant = serializer.save(option=self.get_option())
        logger.info("Created variant %s under option %s", variant.pk, variant.option_id)

    def perform_update(self, serializer):
        serializer.instance._changed_by = actor_id(self.request)
        serializer.save()


class CategoryViewSet(viewsets.ModelViewSet):
    """
    API endpoint for product categories.
    """
    queryset = Category.objects.select_related('parent')
    serializer_class = CategorySerializer
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['parent']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']


class PriceHistoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for price history (read-only).
    """
    queryset = PriceHistory.objects.select_related('variant')
    serializer_class = PriceHistorySerializer
    filterset_class = PriceHistoryFilter
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    ordering = ['-changed_at', '-id']
