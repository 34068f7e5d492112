"""
Attachment Views.
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from application.services.audit import record_audit
from infrastructure.persistence.models import Attachment
from ..serializers.attachments import AttachmentSerializer
from .base import BaseModelViewSet


class AttachmentViewSet(BaseModelViewSet):
    """
    Uploaded files. POST /attachments/ takes multipart/form-data with a
    `file` field.
    """

    queryset = Attachment.objects.select_related('uploaded_by')
    serializer_class = AttachmentSerializer
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['is_active', 'file_type', 'uploaded_by']
    search_fields = ['file_name', 'description']
    ordering_fields = ['created_at', 'file_name', 'file_size']
    ordering = ['-created_at']

    def perform_create(self, serializer):
        extra = {}
        # Form posts omit unchecked booleans; a new upload is active unless told otherwise.
        if 'is_active' not in self.request.data:
            extra['is_active'] = True
        instance = serializer.save(
            uploaded_by=self.request.user,
            created_by=self.request.user,
            updated_by=self.request.user,
            **extra,
        )
        record_audit(
            self.get_actor(),
            'create',
            instance,
            changes={'file_name': instance.file_name, 'file_size': instance.file_size},
        )
