import logging

from rest_framework import viewsets, filters

from ..models import Business
from .serializers import BusinessSerializer
from apps.api.permissions import IsBusinessOwner

logger = logging.getLogger(__name__)


class BusinessViewSet(viewsets.ModelViewSet):
    """ViewSet for the requesting user's businesses"""
    serializer_class = BusinessSerializer
    permission_classes = [IsBusinessOwner]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'email', 'tax_id']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return Business.objects.filter(owner=self.request.user)

    def perform_create(self, serializer):
        business = serializer.save(owner=self.request.user)
        logger.info(f"Business '{business.name}' created by {self.request.user.username}")

    def perform_destroy(self, instance):
        logger.info(f"Business '{instance.name}' deleted by {self.request.user.username}")
        instance.delete()
