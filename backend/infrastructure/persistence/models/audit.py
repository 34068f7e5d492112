"""
Audit ORM Models.

Models for audit logging of user actions.
"""

from django.db import models
from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType

import uuid


class AuditLog(models.Model):
    """
    Audit log for all system changes.

    Tracks who did what, when, and what changed.
    """

    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('submit_result', 'Submit result'),
        ('request_revision', 'Request revision'),
        ('sync_rates', 'Sync rates'),
        ('login', 'Login'),
        ('logout', 'Logout'),
        ('export', 'Export'),
        ('import', 'Import'),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # When
    timestamp = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name="Timestamp"
    )

    # Who
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
        verbose_name="User"
    )
    username = models.CharField(
        max_length=150,
        blank=True,
        verbose_name="Username"
    )
    user_ip = models.GenericIPAddressField(
        null=True,
        blank=True,
        verbose_name="IP address"
    )
    user_agent = models.CharField(
        max_length=500,
        blank=True,
        verbose_name="User Agent"
    )

    # What action
    action = models.CharField(
        max_length=20,
        choices=ACTION_CHOICES,
        db_index=True,
        verbose_name="Action"
    )

    # What object (generic foreign key)
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name="Object type"
    )
    object_id = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        verbose_name="Object ID"
    )
    content_object = GenericForeignKey('content_type', 'object_id')
    resource_type = models.CharField(
        max_length=50,
        blank=True,
        db_index=True,
        verbose_name="Resource type"
    )

    # Object representation at time of action
    object_repr = models.CharField(
        max_length=500,
        blank=True,
        verbose_name="Object"
    )

    # What changed (JSON)
    changes = models.JSONField(
        default=dict,
        blank=True,
        verbose_name="Changes"
    )

    # Additional context
    extra_data = models.JSONField(
        default=dict,
        blank=True,
        verbose_name="Extra data"
    )

    class Meta:
        db_table = 'audit_log'
        verbose_name = 'Audit log entry'
        verbose_name_plural = 'Audit log'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['content_type', 'object_id'], name='audit_log_content_4e1b9c_idx'),
            models.Index(fields=['user', 'timestamp'], name='audit_log_user_id_8a2f13_idx'),
            models.Index(fields=['action', 'timestamp'], name='audit_log_action_6c0d7e_idx'),
        ]

    def __str__(self):
        return f"{self.timestamp}: {self.username or self.user} - {self.get_action_display()} {self.object_repr}"
