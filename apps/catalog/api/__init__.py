from .serializers import (
    ProductWriteSerializer,
    ProductListSerializer,
    ProductDetailSerializer,
    OptionTreeSerializer,
    OptionSubmissionSerializer,
    ProductOptionSerializer,
    OptionVariantSerializer,
    CategorySerializer,
    PriceHistorySerializer,
)

__all__ = [
    'ProductWriteSerializer',
    'ProductListSerializer',
    'ProductDetailSerializer',
    'OptionTreeSerializer',
    'OptionSubmissionSerializer',
    'ProductOptionSerializer',
    'OptionVariantSerializer',
    'CategorySerializer',
    'PriceHistorySerializer',
]
