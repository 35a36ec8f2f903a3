import json

from django.core.management.base import BaseCommand, CommandError

from integrator.scheduler import get_scheduler
from integrator.sync import SOURCE_ORDER


class Command(BaseCommand):
    help = "Pull the QPI, status and PIM feeds once and reconcile them into the item store."

    def add_arguments(self, parser):
        parser.add_argument(
            '--source', action='append', choices=SOURCE_ORDER,
            help="Sync only this source (repeatable). Defaults to all three.",
        )

    def handle(self, *args, **options):
        sources = set(options['source']) if options['source'] else None
        report = get_scheduler().trigger(sources=sources)
        if report is None:
            raise CommandError("A catalog sync is already running")
        self.stdout.write(json.dumps(report.to_dict(), indent=2))
