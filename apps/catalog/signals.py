"""
Django signals for the catalog app.
Handles automatic creation of price history records.
"""

from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import OptionVariant, PriceHistory


@receiver(pre_save, sender=OptionVariant)
def track_price_changes(sender, instance, **kwargs):
    """
    Create PriceHistory records when variant prices change.
    The acting admin id is read from `instance._changed_by` when the caller sets it.
    """
    if not instance.pk:
        # New variant, no history to track
        return

    try:
        old_instance = OptionVariant.objects.get(pk=instance.pk)
    except OptionVariant.DoesNotExist:
        return

    changed_by = getattr(instance, '_changed_by', '') or ''

    # Track price changes
    if old_instance.price != instance.price:
        PriceHistory.objects.create(
            variant=instance,
            change_type='price',
            old_price=old_instance.price,
            new_price=instance.price,
            changed_by=changed_by,
        )

    # Track sale price changes
    if old_instance.sale_price != instance.sale_price:
        PriceHistory.objects.create(
            variant=instance,
            change_type='sale',
            old_price=old_instance.sale_price,
            new_price=instance.sale_price,
            changed_by=changed_by,
        )
