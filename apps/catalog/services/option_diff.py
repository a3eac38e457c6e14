"""
Reconciliation of a product's option/variant tree.

Compares the persisted tree with a submitted full-state document and returns
the operations needed to make storage match the submission. Matching is by
identity (option_id / variant_id presence), field values only decide whether
a matched row needs an update.

This module never touches the database; CatalogSyncService feeds it the
persisted state and hands the plan to CatalogWriter.
"""

from dataclasses import dataclass, field, fields as dataclass_fields
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from apps.catalog.exceptions import CatalogValidationError, UnknownReferenceError


@dataclass(frozen=True)
class VariantFields:
    """Editable values of a variant, compared to decide whether an update is due."""
    variant_name: str
    sku: str
    price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    sale_start: Optional[datetime] = None
    sale_end: Optional[datetime] = None
    media: str = ''

    @classmethod
    def from_mapping(cls, data: Mapping) -> 'VariantFields':
        return cls(
            variant_name=data['variant_name'],
            sku=data['sku'],
            price=data.get('price'),
            sale_price=data.get('sale_price'),
            sale_start=data.get('sale_start'),
            sale_end=data.get('sale_end'),
            media=data.get('media') or '',
        )

    @classmethod
    def from_instance(cls, variant) -> 'VariantFields':
        return cls(**{f.name: getattr(variant, f.name) for f in dataclass_fields(cls)})

    def as_model_kwargs(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}


@dataclass(frozen=True)
class VariantState:
    variant_id: int
    fields: VariantFields


@dataclass(frozen=True)
class OptionState:
    option_id: int
    option_name: str
    variants: Tuple[VariantState, ...] = ()


@dataclass(frozen=True)
class SubmittedVariant:
    fields: VariantFields
    variant_id: Optional[int] = None


@dataclass(frozen=True)
class SubmittedOption:
    option_name: str
    variants: Tuple[SubmittedVariant, ...] = ()
    option_id: Optional[int] = None


# =============================================================================
# Operations
# =============================================================================

@dataclass(frozen=True)
class CreateOption:
    key: str
    option_name: str
    kind = 'create_option'


@dataclass(frozen=True)
class UpdateOption:
    option_id: int
    option_name: str
    kind = 'update_option'


@dataclass(frozen=True)
class DeleteOption:
    option_id: int
    kind = 'delete_option'


@dataclass(frozen=True)
class CreateVariant:
    """
    New variant row. Exactly one of `option_id` (existing option) or
    `option_key` (option created in the same plan) is set.
    """
    key: str
    fields: VariantFields
    option_id: Optional[int] = None
    option_key: Optional[str] = None
    kind = 'create_variant'


@dataclass(frozen=True)
class UpdateVariant:
    variant_id: int
    option_id: int
    fields: VariantFields
    kind = 'update_variant'


@dataclass(frozen=True)
class DeleteVariant:
    variant_id: int
    option_id: int
    kind = 'delete_variant'


Operation = Union[CreateOption, UpdateOption, DeleteOption, CreateVariant, UpdateVariant, DeleteVariant]


@dataclass
class ReconciliationPlan:
    """Operations grouped in the order they have to be executed."""
    variant_deletes: List[DeleteVariant] = field(default_factory=list)
    option_deletes: List[DeleteOption] = field(default_factory=list)
    option_writes: List[Union[CreateOption, UpdateOption]] = field(default_factory=list)
    variant_writes: List[Union[CreateVariant, UpdateVariant]] = field(default_factory=list)

    @property
    def operations(self) -> List[Operation]:
        return [
            *self.variant_deletes,
            *self.option_deletes,
            *self.option_writes,
            *self.variant_writes,
        ]

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def summary(self) -> Dict[str, int]:
        counts = {}
        for op in self.operations:
            counts[op.kind] = counts.get(op.kind, 0) + 1
        return counts


def option_key(option_index: int) -> str:
    return str(option_index)


def variant_key(option_index: int, variant_index: int) -> str:
    return f'{option_index}.{variant_index}'


def _check_duplicates(submitted: Sequence[SubmittedOption]):
    errors = []
    seen_options = set()
    seen_variants = set()
    for i, option in enumerate(submitted):
        if option.option_id is not None:
            if option.option_id in seen_options:
                errors.append({
                    'field': f'{i}.option_id',
                    'message': f'Option {option.option_id} is submitted more than once.',
                })
            seen_options.add(option.option_id)
        for j, variant in enumerate(option.variants):
            if variant.variant_id is None:
                continue
            if variant.variant_id in seen_variants:
                errors.append({
                    'field': f'{i}.variants.{j}.variant_id',
                    'message': f'Variant {variant.variant_id} is submitted more than once.',
                })
            seen_variants.add(variant.variant_id)
    if errors:
        raise CatalogValidationError(errors)


def diff_option_tree(
    persisted: Iterable[OptionState],
    submitted: Sequence[SubmittedOption],
) -> ReconciliationPlan:
    """
    Compute the operations turning `persisted` into `submitted`.

    Raises UnknownReferenceError (before producing any operation) when the
    submission references option or variant ids that are not part of the
    persisted tree, and CatalogValidationError when an id is submitted twice.

    A variant id submitted under a different option of the same product is
    treated as a move: a fresh CreateVariant under the new option, while the
    old row goes away with its original option (DeleteVariant, or the
    cascade of DeleteOption).
    """
    _check_duplicates(submitted)

    options_by_id = {option.option_id: option for option in persisted}
    variant_owner = {}
    for option in options_by_id.values():
        for variant in option.variants:
            variant_owner[variant.variant_id] = option.option_id

    unknown_options = [
        option.option_id for option in submitted
        if option.option_id is not None and option.option_id not in options_by_id
    ]
    unknown_variants = [
        variant.variant_id
        for option in submitted
        for variant in option.variants
        if variant.variant_id is not None and variant.variant_id not in variant_owner
    ]
    if unknown_options or unknown_variants:
        raise UnknownReferenceError(unknown_options, unknown_variants)

    plan = ReconciliationPlan()
    kept_option_ids = {o.option_id for o in submitted if o.option_id is not None}

    for option_id in options_by_id:
        if option_id not in kept_option_ids:
            plan.option_deletes.append(DeleteOption(option_id=option_id))

    for i, option in enumerate(submitted):
        if option.option_id is None:
            plan.option_writes.append(CreateOption(key=option_key(i), option_name=option.option_name))
            target = {'option_key': option_key(i)}
        else:
            current = options_by_id[option.option_id]
            if current.option_name != option.option_name:
                plan.option_writes.append(
                    UpdateOption(option_id=option.option_id, option_name=option.option_name)
                )
            target = {'option_id': option.option_id}

        for j, variant in enumerate(option.variants):
            owner = variant_owner.get(variant.variant_id)
            if variant.variant_id is not None and owner == option.option_id:
                current_fields = _persisted_fields(options_by_id[owner], variant.variant_id)
                if current_fields != variant.fields:
                    plan.variant_writes.append(UpdateVariant(
                        variant_id=variant.variant_id,
                        option_id=owner,
                        fields=variant.fields,
                    ))
            else:
                plan.variant_writes.append(
                    CreateVariant(key=variant_key(i, j), fields=variant.fields, **target)
                )

        if option.option_id is not None:
            submitted_ids = {v.variant_id for v in option.variants if v.variant_id is not None}
            for persisted_variant in options_by_id[option.option_id].variants:
                if persisted_variant.variant_id not in submitted_ids:
                    plan.variant_deletes.append(DeleteVariant(
                        variant_id=persisted_variant.variant_id,
                        option_id=option.option_id,
                    ))

    return plan


def _persisted_fields(option: OptionState, variant_id: int) -> VariantFields:
    for variant in option.variants:
        if variant.variant_id == variant_id:
            return variant.fields
    raise KeyError(variant_id)
