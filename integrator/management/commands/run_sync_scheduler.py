import signal
import threading

from django.core.management.base import BaseCommand

from integrator.scheduler import get_scheduler


class Command(BaseCommand):
    help = "Run the daily catalog sync in-process, for deployments without Celery beat."

    def add_arguments(self, parser):
        parser.add_argument(
            '--now', action='store_true',
            help="Run one sync immediately before waiting for the daily slot.",
        )

    def handle(self, *args, **options):
        scheduler = get_scheduler()
        stopped = threading.Event()

        def _shutdown(signum, frame):
            stopped.set()

        signal.signal(signal.SIGINT, _shutdown)
        signal.signal(signal.SIGTERM, _shutdown)

        if options['now']:
            scheduler.trigger()
        scheduler.start()
        self.stdout.write(f"Next catalog sync at {scheduler.next_run_at.isoformat()}")
        try:
            stopped.wait()
        finally:
            scheduler.stop()
