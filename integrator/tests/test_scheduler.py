import threading
from datetime import datetime
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

from django.core.cache import cache
from django.test import SimpleTestCase

from integrator.scheduler import (
    IDLE,
    LOCK_KEY,
    RUNNING,
    SyncScheduler,
    get_scheduler,
    seconds_until_next_run,
)

NEW_YORK = ZoneInfo('America/New_York')


class TestNextRun(SimpleTestCase):
    def test_later_today(self):
        now = datetime(2024, 6, 1, 1, 30, tzinfo=NEW_YORK)
        self.assertEqual(seconds_until_next_run(now, 2, 0), 30 * 60)

    def test_already_passed_rolls_to_tomorrow(self):
        now = datetime(2024, 6, 1, 2, 0, tzinfo=NEW_YORK)
        self.assertEqual(seconds_until_next_run(now, 2, 0), 24 * 3600)

    def test_dst_spring_forward_day_is_shorter(self):
        now = datetime(2024, 3, 9, 3, 0, tzinfo=NEW_YORK)
        self.assertEqual(seconds_until_next_run(now, 3, 0), 23 * 3600)


class SchedulerTestCase(SimpleTestCase):
    def setUp(self):
        cache.delete(LOCK_KEY)

    def tearDown(self):
        cache.delete(LOCK_KEY)

    def _scheduler(self, run):
        return SyncScheduler(run=run, hour=2, minute=0, tz='America/New_York', lock_timeout=60)


class TestTrigger(SchedulerTestCase):
    def test_trigger_runs_and_returns_report(self):
        report = MagicMock()
        run = MagicMock(return_value=report)
        scheduler = self._scheduler(run)

        self.assertIs(scheduler.trigger(), report)
        run.assert_called_once_with(None)
        self.assertEqual(scheduler.state, IDLE)
        self.assertIs(scheduler.last_report, report)

    def test_trigger_passes_source_subset(self):
        run = MagicMock()
        self._scheduler(run).trigger(sources={'pim'})
        run.assert_called_once_with({'pim'})

    def test_overlapping_trigger_is_rejected(self):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def slow_run(sources):
            calls.append(sources)
            started.set()
            release.wait(5)
            return 'report'

        scheduler = self._scheduler(slow_run)
        worker = threading.Thread(target=scheduler.trigger)
        worker.start()
        try:
            self.assertTrue(started.wait(5))
            self.assertEqual(scheduler.state, RUNNING)
            self.assertIsNone(scheduler.trigger())
        finally:
            release.set()
            worker.join(5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(scheduler.state, IDLE)
        self.assertEqual(scheduler.trigger(), 'report')

    def test_run_in_other_process_is_respected(self):
        run = MagicMock()
        cache.add(LOCK_KEY, 'other-worker', timeout=60)
        self.assertIsNone(self._scheduler(run).trigger())
        run.assert_not_called()

    def test_failed_run_releases_guard(self):
        run = MagicMock(side_effect=[RuntimeError('boom'), 'report'])
        scheduler = self._scheduler(run)
        with self.assertRaises(RuntimeError):
            scheduler.trigger()
        self.assertEqual(scheduler.state, IDLE)
        self.assertIsNone(cache.get(LOCK_KEY))
        self.assertEqual(scheduler.trigger(), 'report')


class TestTimer(SchedulerTestCase):
    def test_start_arms_one_timer(self):
        scheduler = self._scheduler(MagicMock())
        with patch('integrator.scheduler.threading.Timer') as timer_cls:
            scheduler.start()
            scheduler.start()
        timer_cls.assert_called_once()
        delay = timer_cls.call_args[0][0]
        self.assertGreater(delay, 0)
        self.assertLessEqual(delay, 25 * 3600)
        self.assertTrue(scheduler.started)
        self.assertEqual((scheduler.next_run_at.hour, scheduler.next_run_at.minute), (2, 0))

    def test_stop_cancels_pending_timer(self):
        scheduler = self._scheduler(MagicMock())
        with patch('integrator.scheduler.threading.Timer') as timer_cls:
            scheduler.start()
            scheduler.stop()
        timer_cls.return_value.cancel.assert_called_once_with()
        self.assertFalse(scheduler.started)
        self.assertIsNone(scheduler.next_run_at)

    def test_fire_runs_and_rearms(self):
        run = MagicMock()
        scheduler = self._scheduler(run)
        with patch('integrator.scheduler.threading.Timer') as timer_cls:
            scheduler.start()
            scheduler._fire()
        run.assert_called_once_with(None)
        self.assertEqual(timer_cls.call_count, 2)

    def test_fire_after_stop_does_not_rearm(self):
        run = MagicMock()
        scheduler = self._scheduler(run)
        with patch('integrator.scheduler.threading.Timer') as timer_cls:
            scheduler.start()
            scheduler.stop()
            scheduler._fire()
        self.assertEqual(timer_cls.call_count, 1)

    def test_fire_survives_failed_run(self):
        scheduler = self._scheduler(MagicMock(side_effect=RuntimeError('boom')))
        with patch('integrator.scheduler.threading.Timer') as timer_cls:
            scheduler.start()
            with self.assertLogs('integrator.scheduler', level='ERROR'):
                scheduler._fire()
        self.assertEqual(timer_cls.call_count, 2)


class TestGetScheduler(SimpleTestCase):
    def test_process_wide_instance(self):
        self.assertIs(get_scheduler(), get_scheduler())
