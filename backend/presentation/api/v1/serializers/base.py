"""
Base Serializers.

Shared serializer base and field types.
"""

from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """ModelSerializer with the row bookkeeping columns kept read-only."""

    class Meta:
        abstract = True
        read_only_fields = ['id', 'created_at', 'updated_at']


class UUIDListField(serializers.ListField):
    """
    List of UUIDs stored as strings in a JSON column.

    Duplicates are dropped, first occurrence wins.
    """

    child = serializers.UUIDField()

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        seen = []
        for value in values:
            text = str(value)
            if text not in seen:
                seen.append(text)
        return seen
