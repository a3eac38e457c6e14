from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords


class Product(models.Model):
    """
    Base product model.
    Owns its options (and through them the variants) and its ordered media.
    Deleting a product cascades to all of them.
    """
    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )
    sku = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='SKU'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )

    # Pricing - may be left empty when pricing lives on the variants
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

    categories = models.ManyToManyField(
        'Category',
        blank=True,
        related_name='products',
        verbose_name='Categories'
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
        ordering = ['id']
        verbose_name = 'Product'
        verbose_name_plural = 'Products'

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @property
    def option_count(self):
        return self.options.count()

    @property
    def media_count(self):
        return self.media.count()

    @property
    def is_on_sale(self):
        return sale_window_active(self.sale_price, self.sale_start, self.sale_end)

    @property
    def default_media(self):
        return self.media.filter(is_default=True).first()


def sale_window_active(sale_price, sale_start, sale_end, now=None):
    """True when a sale price is set and `now` falls inside the (open-ended) window."""
    if sale_price is None:
        return False
    now = now or timezone.now()
    if sale_start and now < sale_start:
        return False
    if sale_end and now > sale_end:
        return False
    return True


def on_sale_q(now=None):
    """Q expression matching rows for which sale_window_active() holds."""
    now = now or timezone.now()
    return (
        models.Q(sale_price__isnull=False)
        & (models.Q(sale_start__isnull=True) | models.Q(sale_start__lte=now))
        & (models.Q(sale_end__isnull=True) | models.Q(sale_end__gte=now))
    )
