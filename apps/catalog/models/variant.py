from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords

from .product import sale_window_active


class OptionVariant(models.Model):
    """
    One value of a product option (e.g. "Red" under "Color") with its own
    SKU, price and optional sale window.
    The SKU must be present but is not unique across the catalog.
    """
    option = models.ForeignKey(
        'catalog.ProductOption',
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name='Option'
    )
    variant_name = models.CharField(
        max_length=255,
        verbose_name='Variant name'
    )
    sku = models.CharField(
        max_length=100,
        verbose_name='SKU'
    )

    # Pricing
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Price'
    )
    sale_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Sale price'
    )
    sale_start = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Sale start'
    )
    sale_end = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Sale end'
    )

    # Opaque reference to a product media item (client media_id or URL)
    media = models.CharField(
        max_length=2048,
        blank=True,
        default='',
        verbose_name='Media'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['option', 'id']
        verbose_name = 'Variant'
        verbose_name_plural = 'Variants'

    def __str__(self):
        return f"{self.variant_name} ({self.sku})"

    @property
    def product(self):
        return self.option.product

    @property
    def is_on_sale(self):
        return sale_window_active(self.sale_price, self.sale_start, self.sale_end)

    @property
    def effective_price(self):
        if self.is_on_sale:
            return self.sale_price
        return self.price

    @property
    def discount_percentage(self):
        if not self.is_on_sale or not self.price:
            return 0
        return int(((self.price - self.sale_price) / self.price) * 100)
