"""
Base Views.

Common view mixins and base classes.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from application.context import ActorContext
from application.services.audit import diff_fields, record_audit


class AuditViewMixin:
    """
    Mixin that sets audit fields and writes an AuditLog entry on
    create, update and delete.
    """

    def get_actor(self) -> ActorContext:
        return ActorContext.from_request(self.request)

    def perform_create(self, serializer):
        """Set created_by and updated_by on create."""
        instance = serializer.save(
            created_by=self.request.user,
            updated_by=self.request.user
        )
        record_audit(self.get_actor(), 'create', instance, changes=serializer.data)

    def perform_update(self, serializer):
        """Set updated_by on update."""
        before = dict(self.get_serializer(serializer.instance).data)
        instance = serializer.save(updated_by=self.request.user)
        record_audit(self.get_actor(), 'update', instance, changes=diff_fields(before, dict(serializer.data)))

    def perform_destroy(self, instance):
        actor = self.get_actor()
        repr_before = str(instance)
        pk = instance.pk
        instance.delete()
        # The row is gone, so log against a detached copy of its identity.
        instance.pk = pk
        record_audit(actor, 'delete', instance, extra={'object_repr': repr_before})


class HistoryViewMixin:
    """
    Mixin for accessing object history.
    """

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Get object history."""
        obj = self.get_object()

        if not hasattr(obj, 'history'):
            return Response(
                {'error': 'History is not available for this object'},
                status=status.HTTP_400_BAD_REQUEST
            )

        history = obj.history.all()[:50]
        data = [{
            'id': h.history_id,
            'date': h.history_date,
            'user': str(h.history_user) if h.history_user else None,
            'type': h.history_type,
            'changes': h.history_change_reason,
        } for h in history]

        return Response(data)


class BaseModelViewSet(
    AuditViewMixin,
    HistoryViewMixin,
    viewsets.ModelViewSet
):
    """
    Base viewset with common functionality.
    """
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        """
        Return different serializers for list/retrieve actions.

        Override `serializer_classes` dict in subclass:
        serializer_classes = {
            'list': ListSerializer,
            'retrieve': DetailSerializer,
            'default': DetailSerializer,
        }
        """
        serializer_classes = getattr(self, 'serializer_classes', {})
        serializer = serializer_classes.get(self.action) or serializer_classes.get('default')
        if serializer is None:
            serializer = super().get_serializer_class()
        return serializer


class ReadOnlyModelViewSet(
    HistoryViewMixin,
    viewsets.ReadOnlyModelViewSet
):
    """
    Read-only viewset with history support.
    """
    permission_classes = [IsAuthenticated]
