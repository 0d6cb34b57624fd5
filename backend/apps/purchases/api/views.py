from django.db.models import Sum, Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters

from ..models import Purchase
from .. import services
from .serializers import PurchaseSerializer
from apps.api.formatting import money
from apps.api.pagination import StandardResultsSetPagination
from apps.api.permissions import IsBusinessOwner
from apps.businesses.scoping import BusinessScopedViewSetMixin


class PurchaseViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """ViewSet for purchases from creditors"""
    queryset = Purchase.objects.all()
    serializer_class = PurchaseSerializer
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['creditor']
    search_fields = ['purchase_number', 'item_name', 'description', 'creditor__name']
    ordering_fields = ['purchase_date', 'total_price', 'created_at']
    ordering = ['-purchase_date', '-created_at']

    def get_queryset(self):
        queryset = super().get_queryset().select_related('creditor')

        start_date = self.request.query_params.get('start_date', None)
        end_date = self.request.query_params.get('end_date', None)

        if start_date:
            queryset = queryset.filter(purchase_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(purchase_date__lte=end_date)

        return queryset

    def list(self, request, *args, **kwargs):
        """Enhanced list view with purchase totals"""
        response = super().list(request, *args, **kwargs)

        if hasattr(response, 'data') and 'results' in response.data:
            summary = self.filter_queryset(self.get_queryset()).aggregate(
                total_count=Count('id'),
                total_amount=Sum('total_price'),
            )
            response.data['summary'] = {
                'total_count': summary['total_count'] or 0,
                'total_amount': money(summary['total_amount']),
            }

        return response

    def perform_create(self, serializer):
        serializer.instance = services.create_purchase(self.get_business(), **serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = services.update_purchase(serializer.instance, **serializer.validated_data)

    def perform_destroy(self, instance):
        services.delete_purchase(instance)
