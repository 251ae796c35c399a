from celery import shared_task
import logging

from . import services

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def update_page_uri(self, page_id):
    try:
        updated = services.update_page_uri(page_id)
        logger.info("Celery: Recomputed uri for page %s (%s rows updated)", page_id, updated)
        return updated
    except Exception as exc:
        logger.exception("Celery: Failed to recompute uri for page %s: %s", page_id, exc)
        raise self.retry(exc=exc)
