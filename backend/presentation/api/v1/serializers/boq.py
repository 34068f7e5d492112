"""
BOQ Serializers.

Serializers for BOQ items, their tree and breakdown items.
"""

from decimal import Decimal

from rest_framework import serializers

from infrastructure.persistence.models import BOQItem, BreakdownItem
from .base import BaseModelSerializer


class BOQItemSerializer(BaseModelSerializer):
    """Serializer for BOQ items."""

    parent_code = serializers.CharField(source='parent.code', read_only=True, default=None)
    children_count = serializers.IntegerField(source='children.count', read_only=True)

    class Meta:
        model = BOQItem
        fields = [
            'id', 'code',
            'description', 'description_ar',
            'quantity', 'unit', 'unit_ar',
            'unit_rate', 'total_amount',
            'parent', 'parent_code', 'level',
            'children_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'level', 'created_at', 'updated_at']
        extra_kwargs = {
            'total_amount': {'required': False},
        }

    def validate_code(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Code is required.')
        return value

    def validate_parent(self, parent):
        if parent is None or self.instance is None:
            return parent
        # Walk up from the new parent; meeting this item means a cycle.
        node, steps = parent, 0
        while node is not None and steps < 1000:
            if node.pk == self.instance.pk:
                raise serializers.ValidationError('An item cannot be placed under itself or its descendants.')
            node, steps = node.parent, steps + 1
        return parent

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if 'total_amount' not in attrs and ('quantity' in attrs or 'unit_rate' in attrs):
            quantity = attrs.get('quantity', getattr(self.instance, 'quantity', Decimal('0')))
            unit_rate = attrs.get('unit_rate', getattr(self.instance, 'unit_rate', Decimal('0')))
            attrs['total_amount'] = quantity * unit_rate
        return attrs


class BOQItemTreeSerializer(serializers.Serializer):
    """Serializer for BOQ entities in tree format."""

    id = serializers.UUIDField()
    code = serializers.CharField()
    description = serializers.CharField()
    description_ar = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=18, decimal_places=4)
    unit = serializers.CharField()
    unit_ar = serializers.CharField()
    unit_rate = serializers.DecimalField(max_digits=18, decimal_places=4)
    total_amount = serializers.DecimalField(max_digits=20, decimal_places=4, source='boq_amount')
    parent = serializers.UUIDField(source='parent_id', allow_null=True)
    level = serializers.IntegerField()
    is_selectable = serializers.BooleanField(source='is_selectable_leaf')
    children = serializers.SerializerMethodField()

    def get_children(self, obj):
        if obj.children:
            return BOQItemTreeSerializer(obj.children, many=True, context=self.context).data
        return []


class BOQItemFlatSerializer(BOQItemTreeSerializer):
    """Same fields as the tree, without nesting."""

    children = None
    has_children = serializers.BooleanField()


class BreakdownItemSerializer(BaseModelSerializer):
    """Serializer for breakdown items."""

    boq_item_code = serializers.CharField(source='boq_item.code', read_only=True)
    parent_keyword = serializers.CharField(source='parent_breakdown.keyword', read_only=True, default=None)
    is_selectable = serializers.BooleanField(read_only=True)

    class Meta:
        model = BreakdownItem
        fields = [
            'id',
            'boq_item', 'boq_item_code',
            'parent_breakdown', 'parent_keyword',
            'keyword', 'keyword_ar',
            'description', 'description_ar',
            'percentage', 'value',
            'unit_rate', 'quantity',
            'is_leaf', 'is_selectable',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'unit_rate', 'created_at', 'updated_at']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        boq_item = attrs.get('boq_item', getattr(self.instance, 'boq_item', None))
        parent = attrs.get('parent_breakdown', getattr(self.instance, 'parent_breakdown', None))
        if parent is not None:
            if self.instance is not None and parent.pk == self.instance.pk:
                raise serializers.ValidationError({'parent_breakdown': 'A breakdown item cannot be its own parent.'})
            if boq_item is not None and parent.boq_item_id != boq_item.pk:
                raise serializers.ValidationError({
                    'parent_breakdown': 'The parent breakdown item belongs to a different BOQ item.'
                })
        return attrs
