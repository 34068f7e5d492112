"""
BOQ Views.

API views for the Bill of Quantities and breakdown items.
"""

import logging
import uuid
import zipfile

from django.http import HttpResponse
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from openpyxl.utils.exceptions import InvalidFileException
from rest_framework import filters, status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from application.services import boq as boq_service
from application.services import spreadsheets
from application.services.audit import record_audit
from application.services.rate_sync import propagate_unit_rate
from domain.boq.hierarchy import ORDER_CODE, ORDER_INPUT
from infrastructure.persistence.models import BOQItem, BreakdownItem
from presentation.api.pagination import LargeResultsSetPagination
from ..serializers.boq import (
    BOQItemFlatSerializer,
    BOQItemSerializer,
    BOQItemTreeSerializer,
    BreakdownItemSerializer,
)
from .base import BaseModelViewSet

logger = logging.getLogger(__name__)


def _workbook_response(workbook, prefix: str) -> HttpResponse:
    filename = f"{prefix}_{timezone.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    response = HttpResponse(
        spreadsheets.workbook_bytes(workbook),
        content_type=spreadsheets.XLSX_CONTENT_TYPE,
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


class SpreadsheetImportMixin:
    """POST import_excel: multipart upload of an .xlsx file in field `file`."""

    import_function = None

    @action(
        detail=False,
        methods=['post'],
        parser_classes=[MultiPartParser, FormParser],
    )
    def import_excel(self, request):
        upload = request.FILES.get('file')
        if not upload:
            return Response({'error': 'No file provided (field "file").'}, status=status.HTTP_400_BAD_REQUEST)
        if not upload.name.lower().endswith('.xlsx'):
            return Response({'error': 'Only .xlsx files are supported.'}, status=status.HTTP_400_BAD_REQUEST)

        actor = self.get_actor()
        try:
            summary = type(self).import_function(upload, actor)
        except (InvalidFileException, zipfile.BadZipFile) as exc:
            return Response(
                {'error': f'Could not read the Excel file: {exc}'},
                status=status.HTTP_400_BAD_REQUEST
            )

        record_audit(
            actor,
            'import',
            extra={'resource': self.basename, 'file': upload.name, **summary.to_dict()},
        )
        return Response(summary.to_dict())


class BOQItemViewSet(SpreadsheetImportMixin, BaseModelViewSet):
    """
    ViewSet for BOQ items.

    Endpoints:
    - GET /boq-items/ - list items
    - POST /boq-items/ - create item
    - GET/PUT/PATCH/DELETE /boq-items/{id}/
    - GET /boq-items/tree/?ordering=code - nested hierarchy
    - GET /boq-items/flat/?level=N&selectable=true - pre-order list
    - POST /boq-items/{id}/sync_rates/ - copy the unit rate to breakdown items
    - GET /boq-items/export/ - download .xlsx
    - POST /boq-items/import_excel/ - upload .xlsx
    """

    queryset = BOQItem.objects.select_related('parent').prefetch_related('children')
    serializer_class = BOQItemSerializer
    pagination_class = LargeResultsSetPagination
    import_function = staticmethod(spreadsheets.import_boq_workbook)

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['parent', 'level', 'unit']
    search_fields = ['code', 'description', 'description_ar']
    ordering_fields = ['code', 'level', 'created_at', 'total_amount']
    ordering = ['created_at']

    def _order(self, request) -> str:
        return ORDER_CODE if request.query_params.get('ordering') == ORDER_CODE else ORDER_INPUT

    @action(detail=False, methods=['get'])
    def tree(self, request):
        """Full hierarchy; input order unless ?ordering=code."""
        roots = boq_service.boq_tree(self._order(request))
        return Response(BOQItemTreeSerializer(roots, many=True).data)

    @action(detail=False, methods=['get'])
    def flat(self, request):
        """Depth-first list for selectors."""
        level = request.query_params.get('level')
        if level is not None:
            try:
                level = int(level)
            except ValueError:
                return Response({'error': 'level must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
        selectable = request.query_params.get('selectable', '').lower() in ('1', 'true', 'yes')
        nodes = boq_service.boq_flat(self._order(request), level=level, selectable=selectable)
        return Response(BOQItemFlatSerializer(nodes, many=True).data)

    @action(detail=True, methods=['post'])
    def sync_rates(self, request, pk=None):
        """Copy this item's unit rate onto every breakdown item that references it."""
        item = self.get_object()
        result = propagate_unit_rate(item.pk)
        record_audit(self.get_actor(), 'sync_rates', item, extra=result.as_dict())
        return Response(
            result.as_dict(),
            status=status.HTTP_200_OK if result.is_complete else status.HTTP_207_MULTI_STATUS
        )

    @action(detail=False, methods=['get'])
    def export(self, request):
        record_audit(self.get_actor(), 'export', extra={'resource': 'boq_items'})
        return _workbook_response(spreadsheets.export_boq_workbook(), 'BOQ')


class BreakdownItemViewSet(SpreadsheetImportMixin, BaseModelViewSet):
    """
    ViewSet for breakdown items.

    Endpoints:
    - GET /breakdown-items/?boq_item=<id>
    - POST /breakdown-items/
    - GET/PUT/PATCH/DELETE /breakdown-items/{id}/
    - GET /breakdown-items/selectable/?boq_item=<id>&boq_item=<id>
    - GET /breakdown-items/export/
    - POST /breakdown-items/import_excel/
    """

    queryset = BreakdownItem.objects.select_related('boq_item', 'parent_breakdown')
    serializer_class = BreakdownItemSerializer
    pagination_class = LargeResultsSetPagination
    import_function = staticmethod(spreadsheets.import_breakdown_workbook)

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['boq_item', 'parent_breakdown', 'is_leaf']
    search_fields = ['keyword', 'keyword_ar', 'description']
    ordering_fields = ['created_at', 'keyword', 'percentage']
    ordering = ['created_at']

    @action(detail=False, methods=['get'])
    def selectable(self, request):
        """Leaf items with a parent, under the given BOQ items, in input order."""
        try:
            boq_item_ids = [uuid.UUID(value) for value in request.query_params.getlist('boq_item')]
        except ValueError:
            return Response({'error': 'boq_item must be a UUID'}, status=status.HTTP_400_BAD_REQUEST)
        if not boq_item_ids:
            return Response([])
        entities = boq_service.selectable_breakdown(boq_item_ids)
        rows = BreakdownItem.objects.select_related('boq_item', 'parent_breakdown').in_bulk(
            [entity.id for entity in entities]
        )
        items = [rows[entity.id] for entity in entities if entity.id in rows]
        return Response(BreakdownItemSerializer(items, many=True).data)

    @action(detail=False, methods=['get'])
    def export(self, request):
        record_audit(self.get_actor(), 'export', extra={'resource': 'breakdown_items'})
        return _workbook_response(spreadsheets.export_breakdown_workbook(), 'Breakdown')
