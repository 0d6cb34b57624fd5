"""
Per-business scoping for API views and serializers.

Clients pick the active business with the ``X-Business-ID`` header (or the
``business`` query parameter). Only businesses owned by the requesting user
resolve; anything else is a 404.
"""
from rest_framework.exceptions import NotFound, ValidationError

from .models import Business

BUSINESS_HEADER = 'X-Business-ID'


def resolve_business(request):
    business_id = request.headers.get(BUSINESS_HEADER) or request.query_params.get('business')
    if not business_id:
        raise ValidationError({'business': f'Select a business with the {BUSINESS_HEADER} header.'})

    try:
        return Business.objects.get(pk=int(business_id), owner=request.user)
    except (Business.DoesNotExist, ValueError, TypeError):
        raise NotFound('Business not found')


class BusinessScopedViewSetMixin:
    """
    Restricts a ModelViewSet to the active business.

    Querysets are filtered by ``business`` and new records are stamped with it.
    The business is also handed to serializers through the context.
    """

    def get_business(self):
        if not hasattr(self, '_business'):
            self._business = resolve_business(self.request)
        return self._business

    def get_queryset(self):
        return super().get_queryset().filter(business=self.get_business())

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if getattr(self, 'request', None) is not None and self.request.user.is_authenticated:
            context['business'] = self.get_business()
        return context

    def perform_create(self, serializer):
        serializer.save(business=self.get_business())


class BusinessScopedSerializerMixin:
    """Validation helpers for serializers whose related records must share the active business"""

    @property
    def business(self):
        return self.context.get('business')

    def check_same_business(self, obj, field, errors):
        """Record an error on ``field`` if ``obj`` belongs to another business"""
        if obj is not None and self.business is not None and obj.business_id != self.business.id:
            errors[field] = 'Select a record from the active business.'

    def field_value(self, data, field, default=None):
        """Incoming value for ``field``, falling back to the instance on partial updates"""
        if field in data:
            return data[field]
        if self.instance is not None:
            return getattr(self.instance, field, default)
        return default
