"""
Attachment ORM Models.

Files stored in Django's default storage and linked to WIRs.
"""

import os

from django.conf import settings
from django.db import models

from .base import BaseModel


def attachment_upload_to(instance, filename):
    return f"attachments/{instance.id}/{filename}"


class Attachment(BaseModel):
    """Uploaded file with its metadata."""

    feed_table = 'attachments'

    file = models.FileField(
        upload_to=attachment_upload_to,
        max_length=500,
        verbose_name="File"
    )
    file_name = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="File name"
    )
    file_size = models.PositiveBigIntegerField(
        default=0,
        verbose_name="Size (bytes)"
    )
    file_type = models.CharField(
        max_length=100,
        blank=True,
        verbose_name="Content type"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Description"
    )
    tags = models.JSONField(
        default=list,
        blank=True,
        verbose_name="Tags"
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='attachments',
        verbose_name="Uploaded by"
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active"
    )

    class Meta:
        db_table = 'attachments'
        verbose_name = 'Attachment'
        verbose_name_plural = 'Attachments'
        ordering = ['-created_at']

    def __str__(self):
        return self.file_name or os.path.basename(self.file.name or '')

    def save(self, *args, **kwargs):
        if self._state.adding and self.file:
            if not self.file_name:
                self.file_name = os.path.basename(self.file.name)
            if not self.file_size:
                self.file_size = self.file.size or 0
            if not self.file_type:
                self.file_type = getattr(self.file.file, 'content_type', '') or ''
        super().save(*args, **kwargs)
