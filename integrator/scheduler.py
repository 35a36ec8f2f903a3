import logging
import os
import threading
from datetime import timedelta, timezone as dt_timezone
from zoneinfo import ZoneInfo

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from integrator.sync import SyncOrchestrator

logger = logging.getLogger(__name__)

IDLE = 'idle'
RUNNING = 'running'

LOCK_KEY = 'integrator:catalog-sync:running'


def seconds_until_next_run(now, hour, minute):
    """Seconds from ``now`` (tz-aware) until the next ``hour:minute`` wall-clock time."""
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target.astimezone(dt_timezone.utc) - now.astimezone(dt_timezone.utc)).total_seconds()


def _run_orchestrator(sources=None):
    return SyncOrchestrator().run_once(sources=sources)


class SyncScheduler:
    """Owns the daily timer and the idle/running state of catalog syncs.

    ``trigger()`` is the single entry point for every run, scheduled or on
    demand. A trigger that arrives while a run is in progress, in this
    process or in another one sharing the cache, is rejected and returns None.
    """

    def __init__(self, run=None, hour=None, minute=None, tz=None, lock_timeout=None):
        self._run = run or _run_orchestrator
        self.hour = settings.SYNC_DAILY_HOUR if hour is None else hour
        self.minute = settings.SYNC_DAILY_MINUTE if minute is None else minute
        self.tz = ZoneInfo(tz or settings.SYNC_TIMEZONE)
        self.lock_timeout = lock_timeout or settings.SYNC_LOCK_TIMEOUT

        self.state = IDLE
        self.last_report = None
        self.next_run_at = None
        self._state_lock = threading.Lock()
        self._timer = None
        self._timer_lock = threading.Lock()

    @property
    def started(self):
        return self._timer is not None

    def start(self):
        with self._timer_lock:
            if self._timer is not None:
                return
            self._arm()

    def stop(self):
        with self._timer_lock:
            if self._timer is None:
                return
            self._timer.cancel()
            self._timer = None
            self.next_run_at = None
        logger.info("Catalog sync scheduler stopped")

    def trigger(self, sources=None):
        with self._state_lock:
            if self.state == RUNNING:
                logger.warning("Catalog sync already running, trigger rejected")
                return None
            self.state = RUNNING

        try:
            if not cache.add(LOCK_KEY, os.getpid(), timeout=self.lock_timeout):
                logger.warning("Catalog sync running in another process, trigger rejected")
                return None
            try:
                report = self._run(sources)
            finally:
                cache.delete(LOCK_KEY)
            self.last_report = report
            return report
        finally:
            with self._state_lock:
                self.state = IDLE

    def _arm(self):
        now = timezone.now().astimezone(self.tz)
        delay = seconds_until_next_run(now, self.hour, self.minute)
        self.next_run_at = (now.astimezone(dt_timezone.utc) + timedelta(seconds=delay)).astimezone(self.tz)
        self._timer = threading.Timer(delay, self._fire)
        self._timer.daemon = True
        self._timer.start()
        logger.info("Next catalog sync at %s", self.next_run_at.isoformat())

    def _fire(self):
        logger.info("Running scheduled catalog sync")
        try:
            self.trigger()
        except Exception:
            logger.exception("Scheduled catalog sync failed")
        finally:
            with self._timer_lock:
                if self._timer is not None:
                    self._arm()


_scheduler = None
_scheduler_lock = threading.Lock()


def get_scheduler():
    global _scheduler
    with _scheduler_lock:
        if _scheduler is None:
            _scheduler = SyncScheduler()
        return _scheduler
