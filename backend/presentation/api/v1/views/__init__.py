"""
Views Package.

All API viewsets for the WIR tracking system.
"""

from .boq import BOQItemViewSet, BreakdownItemViewSet
from .wir import WIRViewSet
from .staff import ContractorViewSet, EngineerViewSet
from .attachments import AttachmentViewSet
from .audit import AuditLogViewSet

__all__ = [
    'BOQItemViewSet',
    'BreakdownItemViewSet',
    'WIRViewSet',
    'ContractorViewSet',
    'EngineerViewSet',
    'AttachmentViewSet',
    'AuditLogViewSet',
]
