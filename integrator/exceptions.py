class SyncError(Exception):
    """Base class for everything the sync engine raises."""


class SourceUnavailable(SyncError):
    """The feed is absent this run; the source is skipped."""


class SystemicSourceFailure(SyncError):
    """The feed exists but cannot be read at all."""


class MalformedRecord(SyncError):
    """A single row could not be turned into item fields."""


class StoreWriteFailure(SyncError):
    """Writing one item to the store failed."""
