"""
API v1 URL Configuration.

All API endpoints for version 1.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views.boq import (
    BOQItemViewSet,
    BreakdownItemViewSet,
)
from .views.wir import WIRViewSet
from .views.staff import (
    ContractorViewSet,
    EngineerViewSet,
)
from .views.attachments import AttachmentViewSet
from .views.audit import AuditLogViewSet

# Create router
router = DefaultRouter()

# Bill of Quantities
router.register(r'boq-items', BOQItemViewSet, basename='boq-items')
router.register(r'breakdown-items', BreakdownItemViewSet, basename='breakdown-items')

# Work Inspection Requests
router.register(r'wirs', WIRViewSet, basename='wirs')

# Rosters
router.register(r'contractors', ContractorViewSet, basename='contractors')
router.register(r'engineers', EngineerViewSet, basename='engineers')

# Files
router.register(r'attachments', AttachmentViewSet, basename='attachments')

# Audit
router.register(r'audit-logs', AuditLogViewSet, basename='audit-logs')

app_name = 'api_v1'

urlpatterns = [
    path('', include(router.urls)),
]
