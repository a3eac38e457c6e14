from django.db import models


class PriceHistory(models.Model):
    """
    Track price changes for variants for audit purposes.
    Automatically created when an existing variant's price or sale price changes.
    Rows are deleted together with their variant.
    """
    CHANGE_TYPE_CHOICES = [
        ('price', 'Price'),
        ('sale', 'Sale price'),
    ]

    variant = models.ForeignKey(
        'catalog.OptionVariant',
        on_delete=models.CASCADE,
        related_name='price_history',
        verbose_name='Variant'
    )
    change_type = models.CharField(
        max_length=10,
        choices=CHANGE_TYPE_CHOICES,
        verbose_name='Change type'
    )
    old_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Old price'
    )
    new_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='New price'
    )
    # Actor id from the bearer token; admins live in the auth service
    changed_by = models.CharField(
        max_length=64,
        blank=True,
        default='',
        verbose_name='Changed by'
    )
    changed_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Changed at'
    )
    notes = models.TextField(
        blank=True,
        verbose_name='Notes'
    )

    class Meta:
        ordering = ['-changed_at', '-id']
        verbose_name = 'Price history'
        verbose_name_plural = 'Price history'

    def __str__(self):
        return f"{self.variant.sku} - {self.get_change_type_display()}: {self.old_price} → {self.new_price}"

    @property
    def price_difference(self):
        if self.old_price is None or self.new_price is None:
            return None
        return self.new_price - self.old_price

    @property
    def percentage_change(self):
        if self.old_price is None or self.old_price == 0:
            return None
        diff = self.price_difference
        if diff is None:
            return None
        return (diff / self.old_price) * 100
