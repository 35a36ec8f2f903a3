import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.db import connections
from django.utils import timezone

from integrator.exceptions import (
    MalformedRecord,
    SourceUnavailable,
    StoreWriteFailure,
    SystemicSourceFailure,
)
from integrator.reconcile import Reconciler
from integrator.sources.pim_source import PimWorkbookSource
from integrator.sources.qpi_source import QpiCsvSource
from integrator.sources.status_source import StatusSnapshotSource
from integrator.store import DjangoItemStore
from integrator.transforms import MAPPERS, deduplicate

logger = logging.getLogger(__name__)

SOURCE_ORDER = ('qpi', 'status', 'pim')

OK = 'ok'
PARTIAL = 'partial'
SKIPPED = 'skipped'
FAILED = 'failed'


@dataclass
class SyncResult:
    source: str
    status: str = OK
    processed: int = 0
    changed: int = 0
    created: int = 0
    unmatched: int = 0
    skipped: int = 0
    malformed: int = 0
    duplicates: int = 0
    errors: int = 0
    error: Optional[str] = None
    location: Optional[str] = None

    @property
    def success(self):
        return self.status in (OK, PARTIAL)

    def to_dict(self):
        data = asdict(self)
        data['success'] = self.success
        return data

    def summary(self):
        line = (
            f"processed={self.processed} changed={self.changed} created={self.created} "
            f"unmatched={self.unmatched} skipped={self.skipped} "
            f"malformed={self.malformed} duplicates={self.duplicates} errors={self.errors}"
        )
        if self.error:
            line += f" error={self.error}"
        return line


@dataclass
class SyncReport:
    started_at: datetime
    finished_at: Optional[datetime] = None
    results: dict = field(default_factory=dict)

    @property
    def status(self):
        outcomes = [r.success for r in self.results.values()]
        if outcomes and all(r.status == OK for r in self.results.values()):
            return OK
        if not any(outcomes):
            return FAILED
        return PARTIAL

    def to_dict(self):
        return {
            'status': self.status,
            'started_at': self.started_at.isoformat(),
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
            'results': {tag: result.to_dict() for tag, result in self.results.items()},
        }


class SourcePipeline:
    """read -> map -> reconcile for one feed."""

    def __init__(self, source, mapper, reconciler):
        self.source = source
        self.mapper = mapper
        self.reconciler = reconciler

    @property
    def tag(self):
        return self.source.tag

    def run(self) -> SyncResult:
        result = SyncResult(source=self.tag)
        try:
            handle = self.source.locate()
            if handle is None:
                raise SourceUnavailable(f"{self.tag} feed not found")
            result.location = self.source.describe(handle)
            logger.info("Reading %s feed from %s", self.tag, result.location)

            mapped = []
            for raw in self.source.read(handle):
                result.processed += 1
                record = self._map(raw, result)
                if record is not None:
                    mapped.append(record)

            records = deduplicate(mapped)
            result.duplicates = len(mapped) - len(records)
            for record in records:
                self._apply(record, result)
        except SourceUnavailable as exc:
            logger.warning("Skipping %s: %s", self.tag, exc)
            result.status = SKIPPED
            result.error = str(exc)
            return result
        except SystemicSourceFailure as exc:
            logger.error("Aborting %s: %s", self.tag, exc)
            result.status = FAILED
            result.error = str(exc)
            return result
        except Exception as exc:
            logger.exception("Unexpected failure syncing %s", self.tag)
            result.status = FAILED
            result.error = f"{type(exc).__name__}: {exc}"
            return result

        if result.malformed or result.errors:
            result.status = PARTIAL
        return result

    def _map(self, raw, result):
        try:
            record = self.mapper(raw)
        except MalformedRecord as exc:
            logger.warning("Malformed %s row %d: %s", self.tag, result.processed, exc)
            result.malformed += 1
            return None
        if record is None:
            result.skipped += 1
        return record

    def _apply(self, record, result):
        try:
            outcome = self.reconciler.upsert(record)
        except StoreWriteFailure as exc:
            logger.warning("Failed to write %s from %s: %s", record['sku'], self.tag, exc)
            result.errors += 1
            return

        if not outcome.matched:
            result.unmatched += 1
        elif outcome.changed:
            result.changed += 1
            if outcome.created:
                result.created += 1


def default_pipelines(store=None):
    store = store or DjangoItemStore()
    sources = (QpiCsvSource(), StatusSnapshotSource(), PimWorkbookSource())
    return [
        SourcePipeline(source, MAPPERS[source.tag], Reconciler(store, source.tag))
        for source in sources
    ]


class SyncOrchestrator:
    def __init__(self, pipelines=None, parallel=None):
        self.pipelines = list(pipelines) if pipelines is not None else default_pipelines()
        self.parallel = settings.SYNC_PARALLEL if parallel is None else parallel

    def run_once(self, sources=None) -> SyncReport:
        pipelines = [p for p in self.pipelines if sources is None or p.tag in sources]
        report = SyncReport(started_at=timezone.now())
        logger.info("Starting catalog sync: %s", ', '.join(p.tag for p in pipelines))

        if self.parallel and len(pipelines) > 1:
            with ThreadPoolExecutor(max_workers=len(pipelines)) as pool:
                results = list(pool.map(self._run_threaded, pipelines))
        else:
            results = [p.run() for p in pipelines]

        for result in results:
            report.results[result.source] = result
            logger.info("Sync %s %s: %s", result.source, result.status, result.summary())

        report.finished_at = timezone.now()
        logger.info(
            "Catalog sync finished at %s: %s",
            report.finished_at.isoformat(), report.status,
        )
        return report

    def run_source(self, tag) -> SyncResult:
        return self.run_once(sources={tag}).results[tag]

    @staticmethod
    def _run_threaded(pipeline):
        try:
            return pipeline.run()
        finally:
            connections.close_all()
