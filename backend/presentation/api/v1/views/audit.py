"""
Audit Views.

Read-only access to the audit log.
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, viewsets
from rest_framework.permissions import IsAuthenticated

from infrastructure.persistence.models import AuditLog
from ..serializers.audit import AuditLogSerializer


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """GET /audit-logs/?action=&resource_type=&user="""

    queryset = AuditLog.objects.select_related('user')
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated]

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['action', 'resource_type', 'user', 'object_id']
    search_fields = ['username', 'object_repr']
    ordering_fields = ['timestamp', 'action']
    ordering = ['-timestamp']
