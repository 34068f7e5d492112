"""
Audit Serializers.
"""

from rest_framework import serializers

from infrastructure.persistence.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """Read-only serializer for audit log entries."""

    action_display = serializers.CharField(source='get_action_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'timestamp',
            'user', 'username', 'user_ip', 'user_agent',
            'action', 'action_display',
            'resource_type', 'object_id', 'object_repr',
            'changes', 'extra_data',
        ]
        read_only_fields = fields
