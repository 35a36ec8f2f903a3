import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from integrator.exceptions import StoreWriteFailure
from integrator.models import Item, StageEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpsertOutcome:
    matched: bool
    changed: bool = False
    created: bool = False


class ItemStore(ABC):
    @abstractmethod
    def find_by_natural_key(self, sku):
        """Return the item for ``sku`` or None."""

    @abstractmethod
    def upsert(self, sku, merge, source, create=False) -> UpsertOutcome:
        """Run ``merge(item)`` against the row for ``sku`` atomically.

        ``merge`` mutates the item in place and returns
        ``(changed_fields, raised_flags)``.
        """


class DjangoItemStore(ItemStore):
    def find_by_natural_key(self, sku):
        return Item.objects.filter(sku=sku).first()

    def upsert(self, sku, merge, source, create=False):
        try:
            try:
                return self._upsert(sku, merge, source, create)
            except IntegrityError:
                logger.debug("Insert race on %s, retrying as update", sku)
                return self._upsert(sku, merge, source, create=False)
        except DatabaseError as exc:
            raise StoreWriteFailure(f"{sku}: {exc}") from exc

    def _upsert(self, sku, merge, source, create):
        with transaction.atomic():
            item = Item.objects.select_for_update().filter(sku=sku).first()
            created = item is None
            if created:
                if not create:
                    return UpsertOutcome(matched=False)
                item = Item(sku=sku)

            changed_fields, raised_flags = merge(item)
            if not created and not changed_fields:
                return UpsertOutcome(matched=True)

            now = timezone.now()
            item.updated_at = now
            if created:
                item.save()
            else:
                item.save(update_fields=[*changed_fields, 'updated_at'])

            StageEvent.objects.bulk_create([
                StageEvent(item=item, stage=flag, source=source, completed_at=now)
                for flag in raised_flags
            ])
            return UpsertOutcome(matched=True, changed=True, created=created)
