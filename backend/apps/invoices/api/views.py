import logging

from django.db.models import Q, Sum, Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from ..models import Invoice, Bill
from .. import services
from .serializers import InvoiceSerializer, InvoiceListSerializer, BillSerializer, BillListSerializer
from apps.api.formatting import money
from apps.api.pagination import StandardResultsSetPagination
from apps.api.permissions import IsBusinessOwner
from apps.businesses.scoping import BusinessScopedViewSetMixin

logger = logging.getLogger(__name__)


class DocumentViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """
    Shared CRUD for invoices and bills.
    Writes go through the bookkeeping services so the contact's outstanding balance follows every change.
    """
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    ordering_fields = ['issue_date', 'due_date', 'total_amount', 'created_at']
    ordering = ['-issue_date', '-created_at']

    list_serializer_class = None

    def get_queryset(self):
        queryset = super().get_queryset().select_related(self.queryset.model.contact_field)
        if self.action != 'list':
            queryset = queryset.prefetch_related('items')

        # Date range filters
        start_date = self.request.query_params.get('start_date', None)
        end_date = self.request.query_params.get('end_date', None)

        if start_date:
            queryset = queryset.filter(issue_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(issue_date__lte=end_date)

        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return self.list_serializer_class
        return self.serializer_class

    def list(self, request, *args, **kwargs):
        """Enhanced list view with status summary"""
        response = super().list(request, *args, **kwargs)

        if hasattr(response, 'data') and 'results' in response.data:
            model = self.queryset.model
            summary = self.filter_queryset(self.get_queryset()).aggregate(
                total_count=Count('id'),
                amount_total=Sum('total_amount'),
                pending_count=Count('id', filter=Q(status=model.PENDING)),
                pending_amount=Sum('total_amount', filter=Q(status=model.PENDING)),
                overdue_count=Count('id', filter=Q(status=model.OVERDUE)),
                paid_count=Count('id', filter=Q(status=model.PAID)),
                paid_amount=Sum('total_amount', filter=Q(status=model.PAID)),
                cancelled_count=Count('id', filter=Q(status=model.CANCELLED)),
            )
            response.data['summary'] = {
                'total_count': summary['total_count'] or 0,
                'total_amount': money(summary['amount_total']),
                'pending_count': summary['pending_count'] or 0,
                'pending_amount': money(summary['pending_amount']),
                'overdue_count': summary['overdue_count'] or 0,
                'paid_count': summary['paid_count'] or 0,
                'paid_amount': money(summary['paid_amount']),
                'cancelled_count': summary['cancelled_count'] or 0,
            }

        return response

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        items = data.pop('items')
        serializer.instance = services.create_document(
            self.queryset.model, self.get_business(), items, **data
        )

    def perform_update(self, serializer):
        data = dict(serializer.validated_data)
        items = data.pop('items', None)
        serializer.instance = services.update_document(serializer.instance, items=items, **data)

    def perform_destroy(self, instance):
        services.delete_document(instance)

    @action(detail=True, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        """Mark a document as paid"""
        document = self.get_object()

        if document.status == document.PAID:
            return Response(
                {'error': f'{document.number} is already paid'},
                status=status.HTTP_400_BAD_REQUEST
            )
        if document.status == document.CANCELLED:
            return Response(
                {'error': f'{document.number} is cancelled'},
                status=status.HTTP_400_BAD_REQUEST
            )

        services.mark_paid(document)
        return Response({
            'message': f'{document.number} has been marked as paid',
            'status': document.status
        })

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel an open document"""
        document = self.get_object()

        if not document.is_open:
            return Response(
                {'error': f'{document.get_status_display()} documents cannot be cancelled'},
                status=status.HTTP_400_BAD_REQUEST
            )

        services.cancel_document(document)
        return Response({
            'message': f'{document.number} has been cancelled',
            'status': document.status
        })


class InvoiceViewSet(DocumentViewSet):
    """ViewSet for invoices issued to debtors"""
    queryset = Invoice.objects.all()
    serializer_class = InvoiceSerializer
    list_serializer_class = InvoiceListSerializer
    search_fields = ['invoice_number', 'debtor__name', 'notes']
    filterset_fields = ['status', 'debtor']


class BillViewSet(DocumentViewSet):
    """ViewSet for bills received from creditors"""
    queryset = Bill.objects.all()
    serializer_class = BillSerializer
    list_serializer_class = BillListSerializer
    search_fields = ['bill_number', 'creditor__name', 'notes']
    filterset_fields = ['status', 'creditor']
