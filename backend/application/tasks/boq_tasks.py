"""
BOQ Tasks.

Celery tasks for breakdown rate propagation and BOQ exports.
"""

import os
import logging

from celery import shared_task
from django.conf import settings
from django.db import OperationalError
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def propagate_boq_unit_rate(self, boq_item_id: str):
    """
    Copy a BOQ item's unit rate onto its breakdown items.

    Per-item failures are counted in the result, not retried; only a
    lost database connection retries the whole task.
    """
    from application.services.rate_sync import propagate_unit_rate
    from domain.shared.exceptions import EntityNotFoundException

    try:
        return propagate_unit_rate(boq_item_id).as_dict()
    except EntityNotFoundException:
        logger.warning(f"BOQ item {boq_item_id} no longer exists, nothing to sync")
        return {'boq_item_id': boq_item_id, 'error': 'BOQ item not found'}
    except OperationalError as exc:
        logger.error(f"Database unavailable while syncing BOQ item {boq_item_id}: {exc}")
        raise self.retry(exc=exc, countdown=60)


@shared_task
def reconcile_breakdown_rates():
    """Daily repair pass over every BOQ item with stale breakdown rates."""
    from application.services.rate_sync import reconcile_all_unit_rates

    results = reconcile_all_unit_rates()
    return {
        'boq_items': len(results),
        'updated': sum(result.updated for result in results),
        'failed': sum(result.failed for result in results),
        'results': [result.as_dict() for result in results],
    }


@shared_task
def export_boq_to_excel(user_id: str = None):
    """
    Export the BOQ to an Excel file under MEDIA_ROOT.

    Returns the file name and its download URL.
    """
    from application.services.spreadsheets import export_boq_workbook

    wb = export_boq_workbook()

    export_dir = os.path.join(settings.MEDIA_ROOT, settings.WIR_EXPORT_DIR)
    os.makedirs(export_dir, exist_ok=True)

    filename = f"BOQ_{timezone.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    filepath = os.path.join(export_dir, filename)
    wb.save(filepath)

    logger.info(f"Exported BOQ to {filename} (requested by {user_id or 'system'})")

    return {
        'filename': filename,
        'filepath': filepath,
        'download_url': f"{settings.MEDIA_URL}{settings.WIR_EXPORT_DIR}/{filename}",
    }
