"""
WIR Views.

API views for Work Inspection Requests and their reports.
"""

import re

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from application.services import reports
from application.services import wirs as wir_service
from infrastructure.persistence.models import WIR, WIRStatusChoices
from ..serializers.wir import (
    FinancialSummarySerializer,
    MonthlyInvoiceSerializer,
    WIRDetailSerializer,
    WIRListSerializer,
    WIRSubmitResultSerializer,
)
from .base import BaseModelViewSet

MONTH_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


class WIRViewSet(BaseModelViewSet):
    """
    ViewSet for Work Inspection Requests.

    Endpoints:
    - GET /wirs/ - list WIRs
    - POST /wirs/ - submit a WIR (number generated when omitted)
    - GET/PUT/PATCH/DELETE /wirs/{id}/
    - POST /wirs/{id}/submit_result/ - record result A, B or C
    - POST /wirs/{id}/request_revision/ - revise a rejected WIR
    - GET /wirs/{id}/revision_chain/ - origin to this WIR
    - GET /wirs/{id}/history/
    - GET /wirs/next_number/
    - GET /wirs/financial_summary/
    - GET /wirs/invoice/?month=YYYY-MM
    """

    queryset = WIR.objects.select_related(
        'contractor', 'engineer', 'parent_wir', 'original_wir'
    ).prefetch_related('attachments')

    serializer_class = WIRDetailSerializer
    serializer_classes = {
        'list': WIRListSerializer,
        'revision_chain': WIRListSerializer,
        'submit_result': WIRSubmitResultSerializer,
        'default': WIRDetailSerializer,
    }

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['status', 'result', 'contractor', 'engineer', 'region', 'zone', 'original_wir']
    search_fields = ['wir_number', 'description', 'road', 'line']
    ordering_fields = ['wir_number', 'submittal_date', 'received_date', 'calculated_amount', 'created_at']
    ordering = ['-created_at']

    def perform_create(self, serializer):
        serializer.instance = wir_service.create_wir(serializer.validated_data, self.get_actor())

    def perform_update(self, serializer):
        super().perform_update(serializer)
        if serializer.instance.status == WIRStatusChoices.COMPLETED:
            wir_service.refresh_calculation(serializer.instance)

    @action(detail=True, methods=['post'])
    def submit_result(self, request, pk=None):
        wir = self.get_object()
        serializer = WIRSubmitResultSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        wir = wir_service.submit_result(
            wir,
            serializer.validated_data['result'],
            received_date=serializer.validated_data.get('received_date'),
            status_conditions=serializer.validated_data.get('status_conditions', ''),
            actor=self.get_actor(),
        )
        return Response(WIRDetailSerializer(wir, context=self.get_serializer_context()).data)

    @action(detail=True, methods=['post'])
    def request_revision(self, request, pk=None):
        revision = wir_service.request_revision(self.get_object(), self.get_actor())
        return Response(
            WIRDetailSerializer(revision, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['get'])
    def revision_chain(self, request, pk=None):
        chain = wir_service.revision_chain(self.get_object())
        return Response(WIRListSerializer(chain, many=True).data)

    @action(detail=False, methods=['get'])
    def next_number(self, request):
        """Preview of the number the next WIR would get."""
        return Response({'wir_number': wir_service.generate_wir_number()})

    @action(detail=False, methods=['get'])
    def financial_summary(self, request):
        return Response(FinancialSummarySerializer(reports.get_financial_summary()).data)

    @action(detail=False, methods=['get'])
    def invoice(self, request):
        """Invoice for ?month=YYYY-MM; without a month, the months that have data."""
        month = request.query_params.get('month')
        if not month:
            return Response({'months': reports.get_invoice_months()})
        if not MONTH_PATTERN.match(month):
            return Response({'error': 'month must be YYYY-MM'}, status=status.HTTP_400_BAD_REQUEST)
        return Response(MonthlyInvoiceSerializer(reports.get_monthly_invoice(month)).data)
