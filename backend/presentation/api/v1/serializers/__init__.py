"""
Serializers Package.

All API serializers for the WIR tracking system.
"""

from .base import BaseModelSerializer, UUIDListField

from .boq import (
    BOQItemSerializer,
    BOQItemTreeSerializer,
    BOQItemFlatSerializer,
    BreakdownItemSerializer,
)

from .staff import (
    ContractorSerializer,
    EngineerSerializer,
)

from .attachments import AttachmentSerializer

from .wir import (
    WIRListSerializer,
    WIRDetailSerializer,
    WIRSubmitResultSerializer,
    FinancialSummarySerializer,
    MonthlyInvoiceSerializer,
)

from .audit import AuditLogSerializer

__all__ = [
    # Base
    'BaseModelSerializer',
    'UUIDListField',
    # BOQ
    'BOQItemSerializer',
    'BOQItemTreeSerializer',
    'BOQItemFlatSerializer',
    'BreakdownItemSerializer',
    # Staff
    'ContractorSerializer',
    'EngineerSerializer',
    # Files
    'AttachmentSerializer',
    # WIR
    'WIRListSerializer',
    'WIRDetailSerializer',
    'WIRSubmitResultSerializer',
    'FinancialSummarySerializer',
    'MonthlyInvoiceSerializer',
    # Audit
    'AuditLogSerializer',
]
