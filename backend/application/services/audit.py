"""
Audit service.

Writes AuditLog rows for user-visible mutations.
"""

import json
import logging

from django.contrib.contenttypes.models import ContentType
from django.core.serializers.json import DjangoJSONEncoder

from application.context import ActorContext

logger = logging.getLogger(__name__)


def _json_safe(data):
    return json.loads(json.dumps(data or {}, cls=DjangoJSONEncoder))


def diff_fields(before: dict, after: dict) -> dict:
    """{field: {'old': ..., 'new': ...}} for every field whose value changed."""
    return {
        key: {'old': before.get(key), 'new': value}
        for key, value in after.items()
        if before.get(key) != value
    }


def record_audit(actor: ActorContext, action: str, instance=None, changes=None, extra=None):
    """Persist one audit entry for `instance` performed by `actor`."""
    from infrastructure.persistence.models import AuditLog

    actor = actor or ActorContext.system()
    entry = AuditLog(
        user=actor.user,
        username=actor.username,
        user_ip=actor.ip_address,
        user_agent=actor.user_agent,
        action=action,
        changes=_json_safe(changes),
        extra_data=_json_safe(extra),
    )
    if instance is not None:
        entry.content_type = ContentType.objects.get_for_model(instance, for_concrete_model=True)
        entry.object_id = str(instance.pk)
        entry.resource_type = getattr(instance, 'feed_table', None) or instance._meta.db_table
        entry.object_repr = str(instance)[:500]
    entry.save()

    logger.info(
        "audit %s %s %s by %s",
        action, entry.resource_type or '-', entry.object_id or '-', entry.username or 'anonymous',
    )
    return entry
