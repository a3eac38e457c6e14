"""
Service that reconciles submitted catalog documents with storage.

Every call reads the persisted state, computes the plan and writes it in one
transaction, so the diff never works on state older than the write.
"""

import logging
from typing import Dict, List, Mapping, Sequence, Tuple

from django.db import transaction

from apps.catalog.exceptions import CatalogValidationError, UnknownReferenceError
from apps.catalog.models import Product, ProductMedia

from .catalog_projection import option_queryset, project_options, project_product
from .catalog_writer import CatalogWriter, WriteResult, translate_storage_errors
from .media_normalizer import MediaItem, MediaPlan, PersistedMedia, diff_media, normalize_media
from .option_diff import (
    OptionState,
    ReconciliationPlan,
    SubmittedOption,
    SubmittedVariant,
    VariantFields,
    VariantState,
    diff_option_tree,
)

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ('name', 'sku', 'description', 'price', 'sale_price', 'sale_start', 'sale_end')


class CatalogSyncService:
    """
    Entry points used by the API and the management commands.
    `submitted` arguments are documents already validated by the API serializers.
    """

    @staticmethod
    def load_option_tree(product: Product) -> List[OptionState]:
        """Persisted options of the product keyed by id, variants included, in one read."""
        return [
            OptionState(
                option_id=option.pk,
                option_name=option.option_name,
                variants=tuple(
                    VariantState(variant_id=v.pk, fields=VariantFields.from_instance(v))
                    for v in option.variants.all()
                ),
            )
            for option in option_queryset().filter(product=product)
        ]

    @staticmethod
    def load_media(product: Product) -> List[PersistedMedia]:
        return [
            PersistedMedia(
                pk=media.pk,
                item=MediaItem(
                    media_id=media.media_id,
                    url=media.url,
                    title=media.title,
                    default=media.is_default,
                    order=media.order,
                ),
            )
            for media in ProductMedia.objects.filter(product=product).order_by('order', 'id')
        ]

    @staticmethod
    def to_submitted(options: Sequence[Mapping]) -> List[SubmittedOption]:
        return [
            SubmittedOption(
                option_id=option.get('option_id'),
                option_name=option['option_name'],
                variants=tuple(
                    SubmittedVariant(
                        variant_id=variant.get('variant_id'),
                        fields=VariantFields.from_mapping(variant),
                    )
                    for variant in option.get('variants') or []
                ),
            )
            for option in options
        ]

    @staticmethod
    def plan_options(product: Product, options: Sequence[Mapping]) -> ReconciliationPlan:
        persisted = CatalogSyncService.load_option_tree(product)
        try:
            return diff_option_tree(persisted, CatalogSyncService.to_submitted(options))
        except (UnknownReferenceError, CatalogValidationError) as exc:
            logger.warning(
                "Rejected option document for product %s: %s",
                product.pk, getattr(exc, 'errors', exc.detail)
            )
            raise

    @staticmethod
    def plan_media(product: Product, media: Sequence[Mapping]) -> MediaPlan:
        try:
            normalized = normalize_media(media)
        except CatalogValidationError as exc:
            logger.warning("Rejected media list for product %s: %s", product.pk, exc.errors)
            raise
        return diff_media(CatalogSyncService.load_media(product), normalized)

    @staticmethod
    def sync_options(product: Product, options: Sequence[Mapping], actor_id='') -> Tuple[list, Dict]:
        """
        Replace the product's option tree with `options`.
        Returns the canonical tree and the ids assigned to created rows.
        """
        with translate_storage_errors(product.pk):
            with transaction.atomic():
                plan = CatalogSyncService.plan_options(product, options)
                _log_plan(product, plan.summary())
                result = CatalogWriter(product, actor_id).apply(plan=plan)
                tree = project_options(product)
        return tree, result.as_dict()

    @staticmethod
    def sync_media(product: Product, media: Sequence[Mapping], actor_id='') -> WriteResult:
        with translate_storage_errors(product.pk):
            with transaction.atomic():
                media_plan = CatalogSyncService.plan_media(product, media)
                _log_plan(product, media_plan.summary())
                return CatalogWriter(product, actor_id).apply(media_plan=media_plan)

    @staticmethod
    def create_product(data: Mapping, actor_id='') -> Tuple[Product, WriteResult]:
        """Create a product together with its options, media and categories."""
        fields = {name: data[name] for name in PRODUCT_FIELDS if name in data}
        with translate_storage_errors():
            with transaction.atomic():
                product = Product(**fields)
                product._change_reason = 'created'
                product.save()
                logger.info("Created product %s (%s)", product.pk, product.sku)
                result = CatalogSyncService._write_nested(product, data, actor_id)
        return product, result

    @staticmethod
    def update_product(product: Product, data: Mapping, actor_id='') -> WriteResult:
        """
        Update product fields. Nested collections present in `data` are
        reconciled as full-state documents; absent ones are left untouched.
        """
        fields = {name: data[name] for name in PRODUCT_FIELDS if name in data}
        with translate_storage_errors(product.pk):
            with transaction.atomic():
                if fields:
                    CatalogWriter(product, actor_id).apply(product_fields=fields)
                return CatalogSyncService._write_nested(product, data, actor_id)

    @staticmethod
    def assign_categories(product: Product, categories, actor_id='') -> WriteResult:
        category_ids = [getattr(c, 'pk', c) for c in categories]
        logger.info("Assigning categories %s to product %s", category_ids, product.pk)
        return CatalogWriter(product, actor_id).apply(category_ids=category_ids)

    @staticmethod
    def _write_nested(product, data, actor_id) -> WriteResult:
        plan = None
        media_plan = None
        category_ids = None
        summary = {}
        if 'options' in data:
            plan = CatalogSyncService.plan_options(product, data['options'])
            summary.update(plan.summary())
        if 'product_media' in data:
            media_plan = CatalogSyncService.plan_media(product, data['product_media'])
            summary.update(media_plan.summary())
        if 'category_ids' in data:
            category_ids = [getattr(c, 'pk', c) for c in data['category_ids']]
        _log_plan(product, summary)
        return CatalogWriter(product, actor_id).apply(
            category_ids=category_ids, plan=plan, media_plan=media_plan
        )

    @staticmethod
    def canonical_product(product_id) -> Dict:
        return project_product(product_id)


def _log_plan(product, summary):
    if summary and any(summary.values()):
        logger.info("Reconciling product %s: %s", product.pk, summary)
    else:
        logger.info("Reconciling product %s: no changes", product.pk)
