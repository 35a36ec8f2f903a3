import logging

from celery import shared_task

from integrator.scheduler import get_scheduler

logger = logging.getLogger(__name__)

REJECTED = {'status': 'rejected'}


@shared_task
def sync_catalog(sources=None):
    report = get_scheduler().trigger(sources=set(sources) if sources else None)
    if report is None:
        logger.info("Celery catalog sync skipped: another run is in progress")
        return REJECTED
    return report.to_dict()
