"""
Normalization of a submitted product media list.

The array index is the display order, and when several items claim to be
the default only the last one keeps the flag. Items are matched to stored
rows by their client token (`media_id`); rows whose token is absent from the
submission are deleted.
"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from apps.catalog.exceptions import CatalogValidationError


@dataclass(frozen=True)
class MediaItem:
    media_id: str
    url: str
    title: str = ''
    default: bool = False
    order: int = 0


@dataclass(frozen=True)
class PersistedMedia:
    pk: int
    item: MediaItem


@dataclass
class MediaPlan:
    creates: List[MediaItem] = field(default_factory=list)
    updates: List[Tuple[int, MediaItem]] = field(default_factory=list)
    deletes: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)

    def summary(self) -> Dict[str, int]:
        return {
            'create_media': len(self.creates),
            'update_media': len(self.updates),
            'delete_media': len(self.deletes),
        }


def mint_media_id() -> str:
    return uuid.uuid4().hex


def normalize_media(submitted: Sequence[Mapping]) -> List[MediaItem]:
    """
    Return the submitted media as MediaItems with `order` set to the array
    index and at most one default (the last one flagged).
    """
    last_default = None
    for index, raw in enumerate(submitted):
        if raw.get('default'):
            last_default = index

    items = []
    seen = set()
    errors = []
    for index, raw in enumerate(submitted):
        media_id = (raw.get('media_id') or '').strip() or mint_media_id()
        if media_id in seen:
            errors.append({
                'field': f'product_media.{index}.media_id',
                'message': f'Media id "{media_id}" is used more than once.',
            })
        seen.add(media_id)
        items.append(MediaItem(
            media_id=media_id,
            url=raw['url'],
            title=raw.get('title') or '',
            default=index == last_default,
            order=index,
        ))

    if errors:
        raise CatalogValidationError(errors)
    return items


def diff_media(persisted: Iterable[PersistedMedia], normalized: Sequence[MediaItem]) -> MediaPlan:
    """Match normalized items to stored rows by media_id; unchanged rows are skipped."""
    stored = {row.item.media_id: row for row in persisted}
    plan = MediaPlan()

    for item in normalized:
        row = stored.pop(item.media_id, None)
        if row is None:
            plan.creates.append(item)
        elif row.item != item:
            plan.updates.append((row.pk, item))

    plan.deletes.extend(row.pk for row in stored.values())
    return plan
