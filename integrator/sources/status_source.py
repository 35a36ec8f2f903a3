import logging
import re
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
from django.conf import settings

from integrator.exceptions import SystemicSourceFailure

from .base import BaseSource

logger = logging.getLogger(__name__)

STATUS_COLUMNS = ('sku', 'summaries_0_asin', 'summaries_0_itemName', 'summaries_0_status_0')
BATCH_SIZE = 1000


def latest_snapshot(directory, pattern):
    """Pick the last file in name order among those matching ``pattern``.

    Dated names only sort chronologically when their dates are zero-padded;
    the name order is taken as-is.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return None
    regex = re.compile(pattern)
    names = sorted(
        entry.name for entry in directory.iterdir()
        if entry.is_file() and regex.search(entry.name)
    )
    if not names:
        return None
    return directory / names[-1]


class StatusSnapshotSource(BaseSource):
    """Marketplace status: a directory of dated Parquet snapshots."""

    tag = 'status'

    def __init__(self, directory=None, pattern=None, columns=STATUS_COLUMNS):
        self.directory = Path(directory or settings.SYNC_STATUS_DIR)
        self.pattern = pattern or settings.SYNC_STATUS_PATTERN
        self.columns = columns

    def locate(self):
        path = latest_snapshot(self.directory, self.pattern)
        if path is None:
            logger.info("No status snapshot matching %r in %s", self.pattern, self.directory)
        return path

    def read(self, handle):
        try:
            parquet = pq.ParquetFile(handle)
        except (OSError, pa.ArrowException) as exc:
            raise SystemicSourceFailure(f"cannot open {handle}: {exc}") from exc

        try:
            available = set(parquet.schema_arrow.names)
            columns = [c for c in self.columns if c in available]
            for batch in parquet.iter_batches(batch_size=BATCH_SIZE, columns=columns):
                yield from batch.to_pylist()
        except (OSError, pa.ArrowException) as exc:
            raise SystemicSourceFailure(f"cannot read {handle}: {exc}") from exc
        finally:
            parquet.close()
