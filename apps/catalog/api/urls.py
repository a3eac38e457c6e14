from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ProductViewSet,
    ProductOptionViewSet,
    OptionVariantViewSet,
    CategoryViewSet,
    PriceHistoryViewSet,
)

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='product')
router.register(r'product-options', ProductOptionViewSet, basename='product-option')
router.register(r'product-categories', CategoryViewSet, basename='product-category')
router.register(r'price-history', PriceHistoryViewSet, basename='price-history')

variant_list = OptionVariantViewSet.as_view({'get': 'list', 'post': 'create'})
variant_detail = OptionVariantViewSet.as_view({
    'get': 'retrieve',
    'put': 'update',
    'patch': 'partial_update',
    'delete': 'destroy',
})

urlpatterns = [
    path('product-options/<int:option_pk>/variants/', variant_list, name='option-variant-list'),
    path('product-options/<int:option_pk>/variants/<int:pk>/', variant_detail, name='option-variant-detail'),
    path('', include(router.urls)),
]
