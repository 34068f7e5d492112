"""
Attachment Serializers.
"""

from rest_framework import serializers

from infrastructure.persistence.models import Attachment
from .base import BaseModelSerializer


class AttachmentSerializer(BaseModelSerializer):
    """Serializer for uploaded files."""

    url = serializers.SerializerMethodField()
    uploaded_by_name = serializers.CharField(source='uploaded_by.username', read_only=True, default=None)

    class Meta:
        model = Attachment
        fields = [
            'id', 'file', 'url',
            'file_name', 'file_size', 'file_type',
            'description', 'tags',
            'uploaded_by', 'uploaded_by_name',
            'is_active',
            'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'file_size', 'file_type', 'uploaded_by',
            'created_at', 'updated_at'
        ]
        extra_kwargs = {
            'file_name': {'required': False},
        }

    def get_url(self, obj):
        if not obj.file:
            return None
        request = self.context.get('request')
        url = obj.file.url
        return request.build_absolute_uri(url) if request else url

    def validate_tags(self, value):
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            raise serializers.ValidationError('Tags must be a list of strings.')
        return value
