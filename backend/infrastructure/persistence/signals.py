"""
Persistence signal handlers.

Every model with a `feed_table` publishes insert/update/delete row
changes to the change-notification feed once the transaction commits.
"""

import logging

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from domain.shared.events import ChangeKind

logger = logging.getLogger(__name__)


def _publish_on_commit(kind, instance):
    from application.realtime import publish_row_change

    table = instance.feed_table
    row = instance.feed_row()
    logger.debug("Queue %s %s %s", kind.value, table, row.get('id'))
    transaction.on_commit(lambda: publish_row_change(kind, table, row))


@receiver(post_save, dispatch_uid='persistence_feed_post_save')
def publish_saved_row(sender, instance, created, raw=False, **kwargs):
    if raw or getattr(sender, 'feed_table', None) is None:
        return
    _publish_on_commit(ChangeKind.INSERT if created else ChangeKind.UPDATE, instance)


@receiver(post_delete, dispatch_uid='persistence_feed_post_delete')
def publish_deleted_row(sender, instance, **kwargs):
    if getattr(sender, 'feed_table', None) is None:
        return
    _publish_on_commit(ChangeKind.DELETE, instance)
