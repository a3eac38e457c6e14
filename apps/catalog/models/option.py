from django.db import models


class ProductOption(models.Model):
    """
    A configurable dimension of a product, e.g. "Color" or "Size".
    Each option owns its variants (Red, Blue, ...).
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='options',
        verbose_name='Product'
    )
    option_name = models.CharField(
        max_length=255,
        verbose_name='Option name'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    class Meta:
        ordering = ['product', 'id']
        verbose_name = 'Product option'
        verbose_name_plural = 'Product options'

    def __str__(self):
        return f"{self.option_name} [{self.product.name}]"

    @property
    def variant_count(self):
        return self.variants.count()
