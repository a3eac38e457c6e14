from django.db import models


class ProductMedia(models.Model):
    """
    Ordered media item of a product.

    `media_id` is the client-generated token that identifies the item across
    edits; the primary key is the storage identity. At most one item per
    product is the default.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='media',
        verbose_name='Product'
    )
    media_id = models.CharField(
        max_length=64,
        verbose_name='Media token'
    )
    url = models.CharField(
        max_length=2048,
        verbose_name='URL'
    )
    title = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name='Title'
    )
    is_default = models.BooleanField(
        default=False,
        verbose_name='Default media'
    )
    order = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name='Display order'
    )

    class Meta:
        ordering = ['order', 'id']
        verbose_name = 'Product media'
        verbose_name_plural = 'Product media'
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'media_id'],
                name='unique_media_token_per_product',
            ),
            models.UniqueConstraint(
                fields=['product'],
                condition=models.Q(is_default=True),
                name='single_default_media_per_product',
            ),
        ]

    def __str__(self):
        return f"{self.product.sku} - media {self.order}"

    def validate_constraints(self, exclude=None):
        # save() demotes the previous default, so forms may flag a new one
        exclude = set(exclude or ())
        exclude.add('is_default')
        super().validate_constraints(exclude=exclude)

    def save(self, *args, **kwargs):
        # Ensure only one default media per product
        if self.is_default:
            ProductMedia.objects.filter(
                product_id=self.product_id,
                is_default=True
            ).exclude(pk=self.pk).update(is_default=False)

        super().save(*args, **kwargs)
