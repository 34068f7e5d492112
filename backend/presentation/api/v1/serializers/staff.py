"""
Staff Serializers.

Serializers for contractors and engineers.
"""

from rest_framework import serializers

from infrastructure.persistence.models import Contractor, Engineer
from .base import BaseModelSerializer


class ContractorSerializer(BaseModelSerializer):
    """Serializer for contractors."""

    wir_count = serializers.IntegerField(source='wirs.count', read_only=True)

    class Meta:
        model = Contractor
        fields = [
            'id', 'name', 'company', 'email', 'phone',
            'wir_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value


class EngineerSerializer(BaseModelSerializer):
    """Serializer for engineers."""

    wir_count = serializers.IntegerField(source='wirs.count', read_only=True)

    class Meta:
        model = Engineer
        fields = [
            'id', 'name', 'department', 'email', 'phone', 'specialization',
            'wir_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value
