import threading
import zlib
from functools import partial

from integrator.models import STAGE_FLAGS
from integrator.store import UpsertOutcome

# Higher rank wins when two sources supply a display name.
NAME_PRECEDENCE = {'qpi': 1, 'status': 2, 'pim': 3}

# Only the validation extract may introduce new items.
CREATING_SOURCES = frozenset({'qpi'})

LOCK_STRIPES = 64


class KeyLocks:
    """Striped per-key locks shared by every reconciler in the process."""

    def __init__(self, stripes=LOCK_STRIPES):
        self._locks = [threading.Lock() for _ in range(stripes)]

    def for_key(self, key) -> threading.Lock:
        return self._locks[zlib.crc32(key.encode('utf-8')) % len(self._locks)]


_key_locks = KeyLocks()


class Reconciler:
    def __init__(self, store, source, can_create=None, locks=None):
        self.store = store
        self.source = source
        self.can_create = source in CREATING_SOURCES if can_create is None else can_create
        self.locks = locks or _key_locks

    def upsert(self, record) -> UpsertOutcome:
        sku = record['sku']
        with self.locks.for_key(sku):
            return self.store.upsert(
                sku, partial(self.merge, record), self.source, create=self.can_create,
            )

    def merge(self, record, item):
        """Apply one canonical record to ``item``; return (changed, raised flags)."""
        changed = []

        for field, value in record['fields'].items():
            if field == 'asin' and item.asin:
                continue
            if field == 'name':
                if not self._may_rename(item):
                    continue
                if item.name_source != self.source:
                    item.name_source = self.source
                    changed.append('name_source')
            if getattr(item, field) != value:
                setattr(item, field, value)
                changed.append(field)

        raised = []
        for flag, value in record['flags'].items():
            if flag not in STAGE_FLAGS:
                raise ValueError(f"unknown stage flag {flag!r}")
            # Flags only advance; a source never clears one.
            if value and not getattr(item, flag):
                setattr(item, flag, True)
                changed.append(flag)
                raised.append(flag)

        return changed, raised

    def _may_rename(self, item):
        if not item.name:
            return True
        current = NAME_PRECEDENCE.get(item.name_source, 0)
        return NAME_PRECEDENCE.get(self.source, 0) >= current
