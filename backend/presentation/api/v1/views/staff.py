"""
Staff Views.

API views for contractor and engineer rosters.
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters

from infrastructure.persistence.models import Contractor, Engineer
from ..serializers.staff import ContractorSerializer, EngineerSerializer
from .base import BaseModelViewSet


class ContractorViewSet(BaseModelViewSet):
    """
    ViewSet for contractors.

    Deleting a contractor referenced by a WIR returns 409.
    """

    queryset = Contractor.objects.all()
    serializer_class = ContractorSerializer

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['company']
    search_fields = ['name', 'company', 'email']
    ordering_fields = ['name', 'company', 'created_at']
    ordering = ['name']


class EngineerViewSet(BaseModelViewSet):
    """ViewSet for engineers."""

    queryset = Engineer.objects.all()
    serializer_class = EngineerSerializer

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ['department', 'specialization']
    search_fields = ['name', 'department', 'email']
    ordering_fields = ['name', 'department', 'created_at']
    ordering = ['name']
