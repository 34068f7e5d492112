"""
WIR Serializers.

Serializers for Work Inspection Requests, result submission and reports.
"""

from rest_framework import serializers

from application.services.wirs import check_selection
from domain.shared.exceptions import ValidationException
from infrastructure.persistence.models import (
    Attachment,
    BOQItem,
    WIR,
    WIRResultChoices,
)
from .base import BaseModelSerializer, UUIDListField


class WIRListSerializer(BaseModelSerializer):
    """List serializer for WIRs."""

    contractor_name = serializers.CharField(source='contractor.name', read_only=True, default=None)
    engineer_name = serializers.CharField(source='engineer.name', read_only=True, default=None)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    result_display = serializers.CharField(source='get_result_display', read_only=True)

    class Meta:
        model = WIR
        fields = [
            'id', 'wir_number', 'description',
            'submittal_date', 'received_date',
            'status', 'status_display',
            'result', 'result_display',
            'contractor', 'contractor_name',
            'engineer', 'engineer_name',
            'value', 'calculated_amount',
            'revision_number',
            'created_at', 'updated_at'
        ]


class WIRDetailSerializer(BaseModelSerializer):
    """
    Detail serializer for WIRs.

    Status, result and the calculated fields are read-only here; they
    change through the submit_result and request_revision actions.
    """

    wir_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    linked_boq_items = UUIDListField(required=False)
    selected_breakdown_items = UUIDListField(required=False)
    attachments = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Attachment.objects.all(),
        required=False,
    )
    contractor_name = serializers.CharField(source='contractor.name', read_only=True, default=None)
    engineer_name = serializers.CharField(source='engineer.name', read_only=True, default=None)
    parent_wir_number = serializers.CharField(source='parent_wir.wir_number', read_only=True, default=None)
    original_wir_number = serializers.CharField(source='original_wir.wir_number', read_only=True, default=None)
    has_revision = serializers.SerializerMethodField()

    class Meta:
        model = WIR
        fields = [
            'id', 'wir_number',
            'description', 'description_ar',
            'submittal_date', 'received_date', 'start_on_site_date',
            'status', 'result', 'status_conditions',
            'contractor', 'contractor_name',
            'engineer', 'engineer_name',
            'region', 'zone', 'road', 'line',
            'manhole_from', 'manhole_to',
            'length_of_line', 'diameter_of_line', 'line_no',
            'value',
            'linked_boq_items', 'selected_breakdown_items',
            'calculated_amount', 'calculation_equation',
            'attachments',
            'parent_wir', 'parent_wir_number',
            'original_wir', 'original_wir_number',
            'revision_number', 'has_revision',
            'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id',
            'status', 'result', 'status_conditions', 'received_date',
            'calculated_amount', 'calculation_equation',
            'parent_wir', 'original_wir', 'revision_number',
            'created_at', 'updated_at'
        ]
        extra_kwargs = {
            'submittal_date': {'required': False},
        }

    def get_has_revision(self, obj):
        return obj.revisions.exists()

    def validate_wir_number(self, value):
        value = (value or '').strip()
        if not value:
            # Blank means "generate one", which only applies on create.
            if self.instance is not None:
                raise serializers.ValidationError('A WIR number cannot be cleared.')
            return value
        queryset = WIR.objects.filter(wir_number=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError(f'WIR number "{value}" is already in use.')
        return value

    def validate_linked_boq_items(self, value):
        items = {str(item.pk): item for item in BOQItem.objects.filter(id__in=value).prefetch_related('children')}
        missing = [boq_id for boq_id in value if boq_id not in items]
        if missing:
            raise serializers.ValidationError(f'Unknown BOQ items: {", ".join(missing)}')
        not_leaves = [
            items[boq_id].code for boq_id in value
            if items[boq_id].children.all() or items[boq_id].quantity <= 0
        ]
        if not_leaves:
            raise serializers.ValidationError(
                f'Only leaf BOQ items with a quantity can be linked: {", ".join(not_leaves)}'
            )
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        linked = attrs.get('linked_boq_items', getattr(self.instance, 'linked_boq_items', []))
        selected = attrs.get('selected_breakdown_items', getattr(self.instance, 'selected_breakdown_items', []))
        try:
            check_selection(linked, selected)
        except ValidationException as exc:
            raise serializers.ValidationError({'selected_breakdown_items': exc.message})
        return attrs


class WIRSubmitResultSerializer(serializers.Serializer):
    """Input for recording an inspection result."""

    result = serializers.ChoiceField(choices=WIRResultChoices.choices)
    received_date = serializers.DateField(required=False, allow_null=True)
    status_conditions = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['result'] == WIRResultChoices.CONDITIONAL and not attrs.get('status_conditions', '').strip():
            raise serializers.ValidationError({
                'status_conditions': 'Conditions are required for result B.'
            })
        return attrs


class FinancialSummarySerializer(serializers.Serializer):
    total_approved_wirs = serializers.IntegerField()
    total_conditional_wirs = serializers.IntegerField()
    total_rejected_wirs = serializers.IntegerField()
    total_approved_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    total_conditional_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    total_boq_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    cost_variance_against_boq = serializers.DecimalField(max_digits=20, decimal_places=2)


class MonthlyInvoiceSerializer(serializers.Serializer):
    month = serializers.CharField()
    previous_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    current_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    cumulative_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    total_boq_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    approved_wirs = serializers.SerializerMethodField()

    def get_approved_wirs(self, obj):
        return [
            {
                'id': str(wir.id),
                'wir_number': wir.wir_number,
                'received_date': wir.received_date.isoformat() if wir.received_date else None,
                'calculated_amount': str(wir.calculated_amount),
            }
            for wir in obj.approved_wirs
        ]
