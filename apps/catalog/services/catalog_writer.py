"""
Applies reconciliation plans to storage inside a single transaction.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

from django.db import IntegrityError, OperationalError, transaction

from apps.catalog.exceptions import (
    ConstraintViolationError,
    TransientStorageError,
    UnknownReferenceError,
)
from apps.catalog.models import OptionVariant, ProductMedia, ProductOption

from .media_normalizer import MediaPlan
from .option_diff import ReconciliationPlan

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """Identities assigned to rows created by the write."""
    options: Dict[str, int] = field(default_factory=dict)
    variants: Dict[str, int] = field(default_factory=dict)
    media: Dict[str, int] = field(default_factory=dict)

    def as_dict(self):
        return {'options': self.options, 'variants': self.variants, 'media': self.media}


@contextmanager
def translate_storage_errors(product_id=None):
    """Turn database failures into catalog API errors. The caller's transaction is already rolled back."""
    try:
        yield
    except IntegrityError as exc:
        logger.error("Rolled back catalog write for product %s: %s", product_id, exc)
        raise ConstraintViolationError() from exc
    except OperationalError as exc:
        logger.error("Storage unavailable while writing product %s: %s", product_id, exc)
        raise TransientStorageError() from exc


class CatalogWriter:
    """
    Executes operations for one product. Everything passed to apply() is
    written in one transaction; any storage failure rolls all of it back.
    """

    def __init__(self, product, actor_id=''):
        self.product = product
        self.actor_id = str(actor_id or '')

    def apply(
        self,
        product_fields: Optional[Mapping] = None,
        category_ids: Optional[Iterable[int]] = None,
        plan: Optional[ReconciliationPlan] = None,
        media_plan: Optional[MediaPlan] = None,
    ) -> WriteResult:
        result = WriteResult()
        with translate_storage_errors(self.product.pk):
            with transaction.atomic():
                if product_fields:
                    self._write_product(product_fields)
                if category_ids is not None:
                    self.product.categories.set(category_ids)
                if plan is not None:
                    for op in plan.operations:
                        getattr(self, f'_apply_{op.kind}')(op, result)
                if media_plan is not None:
                    self._write_media(media_plan, result)
        return result

    # -------------------------------------------------------------------------
    # Product
    # -------------------------------------------------------------------------

    def _write_product(self, product_fields):
        for name, value in product_fields.items():
            setattr(self.product, name, value)
        self.product._change_reason = 'catalog update'
        self.product.save()

    # -------------------------------------------------------------------------
    # Options / variants
    # -------------------------------------------------------------------------

    def _apply_delete_variant(self, op, result):
        OptionVariant.objects.filter(
            pk=op.variant_id,
            option_id=op.option_id,
            option__product=self.product,
        ).delete()

    def _apply_delete_option(self, op, result):
        ProductOption.objects.filter(pk=op.option_id, product=self.product).delete()

    def _apply_create_option(self, op, result):
        option = ProductOption.objects.create(product=self.product, option_name=op.option_name)
        result.options[op.key] = option.pk

    def _apply_update_option(self, op, result):
        try:
            option = ProductOption.objects.get(pk=op.option_id, product=self.product)
        except ProductOption.DoesNotExist:
            raise UnknownReferenceError(option_ids=[op.option_id])

        option.option_name = op.option_name
        option.save(update_fields=['option_name', 'updated_at'])

    def _apply_create_variant(self, op, result):
        option_id = op.option_id
        if option_id is None:
            option_id = result.options[op.option_key]
        variant = OptionVariant(option_id=option_id, **op.fields.as_model_kwargs())
        variant._changed_by = self.actor_id
        variant._change_reason = 'option reconciliation'
        variant.save()
        result.variants[op.key] = variant.pk

    def _apply_update_variant(self, op, result):
        try:
            variant = OptionVariant.objects.get(
                pk=op.variant_id,
                option_id=op.option_id,
                option__product=self.product,
            )
        except OptionVariant.DoesNotExist:
            raise UnknownReferenceError(variant_ids=[op.variant_id])

        for name, value in op.fields.as_model_kwargs().items():
            setattr(variant, name, value)
        variant._changed_by = self.actor_id
        variant._change_reason = 'option reconciliation'
        variant.save()

    # -------------------------------------------------------------------------
    # Media
    # -------------------------------------------------------------------------

    def _write_media(self, media_plan, result):
        if media_plan.deletes:
            ProductMedia.objects.filter(
                product=self.product, pk__in=media_plan.deletes
            ).delete()

        # Non-default rows first so the default is written last
        updates = sorted(media_plan.updates, key=lambda pair: pair[1].default)
        for pk, item in updates:
            media = ProductMedia.objects.get(pk=pk, product=self.product)
            media.url = item.url
            media.title = item.title
            media.is_default = item.default
            media.order = item.order
            media.save()

        for item in sorted(media_plan.creates, key=lambda i: i.default):
            media = ProductMedia(
                product=self.product,
                media_id=item.media_id,
                url=item.url,
                title=item.title,
                is_default=item.default,
                order=item.order,
            )
            media.save()
            result.media[item.media_id] = media.pk
