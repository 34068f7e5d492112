"""
Base ORM Models and Mixins.

Every tracked row has a UUID key, timestamps and the user who created
and last changed it. Rows of models that set `feed_table` are published
on the change-notification feed; BaseModelWithHistory also keeps
per-row history via django-simple-history.
"""

import json
import uuid

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from simple_history.models import HistoricalRecords


class TimeStampedMixin(models.Model):
    """created_at / updated_at; created_at also orders trees and lists."""

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name="Created at"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated at"
    )

    class Meta:
        abstract = True


class AuditMixin(models.Model):
    """Users who created and last modified the row."""

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_created",
        verbose_name="Created by"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_updated",
        verbose_name="Updated by"
    )

    class Meta:
        abstract = True


class BaseModel(TimeStampedMixin, AuditMixin):
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name="ID"
    )

    # Logical table name on the change feed; None keeps the model off it.
    feed_table = None

    class Meta:
        abstract = True

    def __str__(self):
        return str(self.id)

    def feed_row(self) -> dict:
        """JSON-safe dict of the concrete column values, as sent on the feed."""
        data = {}
        for field in self._meta.concrete_fields:
            value = field.value_from_object(self)
            if isinstance(field, models.FileField):
                value = value.name if value else None
            data[field.attname] = value
        return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


class BaseModelWithHistory(BaseModel):
    """BaseModel whose changes are also kept in a historical table."""

    history = HistoricalRecords(inherit=True)

    class Meta:
        abstract = True
