from decimal import Decimal

import pytest
from django.db import IntegrityError, OperationalError

from apps.catalog.exceptions import (
    ConstraintViolationError,
    TransientStorageError,
    UnknownReferenceError,
)
from apps.catalog.models import OptionVariant, PriceHistory, Product, ProductMedia, ProductOption
from apps.catalog.services import CatalogSyncService, CatalogWriter, diff_option_tree, project_options


def document(tree):
    """Projected tree as a validated submission (string prices back to Decimal)."""
    return [
        {
            'option_id': option['option_id'],
            'option_name': option['option_name'],
            'variants': [
                {**variant, 'price': Decimal(variant['price']) if variant['price'] else None}
                for variant in option['variants']
            ],
        }
        for option in tree
    ]


@pytest.mark.django_db
def test_projection_round_trip_is_a_no_op(product):
    persisted = CatalogSyncService.load_option_tree(product)
    submitted = CatalogSyncService.to_submitted(document(project_options(product)))

    assert diff_option_tree(persisted, submitted).is_empty


@pytest.mark.django_db
def test_sync_is_idempotent(product, red):
    options = [{
        'option_id': red.option_id,
        'option_name': 'Color',
        'variants': [
            {'variant_id': red.pk, 'variant_name': 'Red', 'sku': 'R', 'price': Decimal('11.00')},
            {'variant_name': 'Green', 'sku': 'G', 'price': Decimal('10.00')},
        ],
    }]

    tree, created = CatalogSyncService.sync_options(product, options, actor_id='7')
    green_id = created['variants']['0.1']
    options[0]['variants'][1]['variant_id'] = green_id

    assert CatalogSyncService.plan_options(product, options).is_empty
    assert [v['variant_id'] for v in tree[0]['variants']] == [red.pk, green_id]


@pytest.mark.django_db
def test_changed_variant_keeps_identity_and_records_price_history(product, red):
    options = [{
        'option_id': red.option_id,
        'option_name': 'Color',
        'variants': [
            {'variant_id': red.pk, 'variant_name': 'Red', 'sku': 'R', 'price': Decimal('11.00')},
        ],
    }]

    CatalogSyncService.sync_options(product, options, actor_id='7')

    red.refresh_from_db()
    assert red.price == Decimal('11.00')
    history = PriceHistory.objects.get(variant=red)
    assert history.change_type == 'price'
    assert history.old_price == Decimal('10.00')
    assert history.new_price == Decimal('11.00')
    assert history.changed_by == '7'


@pytest.mark.django_db
def test_unknown_reference_writes_nothing(product, color):
    options = [{
        'option_id': color.pk,
        'option_name': 'Renamed',
        'variants': [{'variant_id': 999999, 'variant_name': 'X', 'sku': 'X'}],
    }]

    with pytest.raises(UnknownReferenceError):
        CatalogSyncService.sync_options(product, options)

    color.refresh_from_db()
    assert color.option_name == 'Color'
    assert color.variants.count() == 2


@pytest.mark.django_db
def test_variant_of_other_product_is_unknown(product, red):
    other = Product.objects.create(name='Other', sku='OTHER', price=Decimal('1.00'))

    with pytest.raises(UnknownReferenceError):
        CatalogSyncService.sync_options(other, [{
            'option_name': 'Color',
            'variants': [{'variant_id': red.pk, 'variant_name': 'Red', 'sku': 'R'}],
        }])

    assert not other.options.exists()


@pytest.mark.django_db
def test_failure_mid_write_rolls_back_everything(product, color, red, monkeypatch):
    def explode(self, op, result):
        raise IntegrityError('forced failure')

    monkeypatch.setattr(CatalogWriter, '_apply_create_variant', explode)
    options = [{
        'option_id': color.pk,
        'option_name': 'Colour',
        'variants': [{'variant_name': 'Green', 'sku': 'G'}],
    }]

    with pytest.raises(ConstraintViolationError):
        CatalogSyncService.sync_options(product, options)

    color.refresh_from_db()
    assert color.option_name == 'Color'
    assert set(color.variants.values_list('variant_name', flat=True)) == {'Red', 'Blue'}


@pytest.mark.django_db
def test_operational_error_is_reported_as_transient(product, color, monkeypatch):
    def drop(self, op, result):
        raise OperationalError('connection lost')

    monkeypatch.setattr(CatalogWriter, '_apply_delete_option', drop)

    with pytest.raises(TransientStorageError):
        CatalogSyncService.sync_options(product, [])

    assert ProductOption.objects.filter(pk=color.pk).exists()


@pytest.mark.django_db
def test_deleting_option_cascades_to_variants(product, color):
    CatalogSyncService.sync_options(product, [])

    assert not ProductOption.objects.filter(product=product).exists()
    assert not OptionVariant.objects.filter(option_id=color.pk).exists()


@pytest.mark.django_db
def test_media_sync_keeps_single_default_and_order(product):
    result = CatalogSyncService.sync_media(product, [
        {'media_id': 'b', 'url': 'https://cdn/b.jpg', 'default': True},
        {'media_id': 'a', 'url': 'https://cdn/a.jpg'},
        {'url': 'https://cdn/c.jpg', 'default': True},
    ])

    media = list(ProductMedia.objects.filter(product=product).order_by('order'))
    assert [m.order for m in media] == [0, 1, 2]
    assert [m.media_id for m in media][:2] == ['b', 'a']
    assert [m.is_default for m in media] == [False, False, True]
    assert list(result.media.values()) == [media[2].pk]


@pytest.mark.django_db
def test_media_omitted_items_are_deleted(product):
    CatalogSyncService.sync_media(product, [{'media_id': 'b', 'url': 'https://cdn/b.jpg'}])

    assert list(ProductMedia.objects.filter(product=product).values_list('media_id', flat=True)) == ['b']
