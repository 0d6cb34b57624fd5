import logging

from django.db.models import Q, Sum, Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from ..models import Payment, Receipt
from .. import services
from .serializers import PaymentSerializer, ReceiptSerializer
from apps.api.formatting import money
from apps.api.pagination import StandardResultsSetPagination
from apps.api.permissions import IsBusinessOwner
from apps.businesses.scoping import BusinessScopedViewSetMixin

logger = logging.getLogger(__name__)


class SettlementViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """
    Shared CRUD for payments and receipts.
    Writes go through the bookkeeping services (outstanding balances, settled documents, bank transactions).
    """
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    ordering_fields = ['payment_date', 'amount', 'created_at']
    ordering = ['-payment_date', '-created_at']

    def get_queryset(self):
        model = self.queryset.model
        queryset = super().get_queryset().select_related(
            model.contact_field, model.document_field, 'bank_account'
        )

        # Date range filters
        start_date = self.request.query_params.get('start_date', None)
        end_date = self.request.query_params.get('end_date', None)

        if start_date:
            queryset = queryset.filter(payment_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(payment_date__lte=end_date)

        return queryset

    def list(self, request, *args, **kwargs):
        """Enhanced list view with amount summary"""
        response = super().list(request, *args, **kwargs)

        if hasattr(response, 'data') and 'results' in response.data:
            summary = self.filter_queryset(self.get_queryset()).aggregate(
                total_count=Count('id'),
                total_amount=Sum('amount'),
                bank_amount=Sum('amount', filter=Q(payment_method=Payment.BANK_TRANSFER)),
            )
            response.data['summary'] = {
                'total_count': summary['total_count'] or 0,
                'total_amount': money(summary['total_amount']),
                'bank_transfer_amount': money(summary['bank_amount']),
            }

        return response

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        create_bank_transaction = data.pop('create_bank_transaction', True)
        serializer.instance = services.record_settlement(
            self.queryset.model, self.get_business(),
            create_bank_transaction=create_bank_transaction, **data
        )

    def perform_update(self, serializer):
        data = dict(serializer.validated_data)
        data.pop('create_bank_transaction', None)
        serializer.instance = services.update_settlement(serializer.instance, **data)

    def perform_destroy(self, instance):
        services.delete_settlement(instance)

    def _open_documents(self, request, contact_param, documents_name, list_serializer):
        contact_id = request.query_params.get(contact_param)
        if not contact_id:
            return Response(
                {'error': f'{contact_param} parameter is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        model = self.queryset.model
        document_model = model._meta.get_field(model.document_field).related_model
        try:
            documents = document_model.objects.filter(
                business=self.get_business(),
                status__in=document_model.OPEN_STATUSES,
                **{f'{contact_param}_id': int(contact_id)}
            ).order_by('due_date')
        except ValueError:
            return Response(
                {'error': f'{contact_param} must be an id'},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({
            documents_name: list_serializer(documents, many=True).data,
            'count': documents.count(),
        })


class PaymentViewSet(SettlementViewSet):
    """ViewSet for payments made to creditors"""
    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    search_fields = ['payment_number', 'reference', 'notes', 'creditor__name']
    filterset_fields = ['creditor', 'bill', 'bank_account', 'payment_method']

    @action(detail=False, methods=['get'], url_path='open-bills')
    def open_bills(self, request):
        """Bills of a creditor that can still be paid (?creditor=)"""
        from apps.invoices.api.serializers import BillListSerializer
        return self._open_documents(request, 'creditor', 'bills', BillListSerializer)


class ReceiptViewSet(SettlementViewSet):
    """ViewSet for payments received from debtors"""
    queryset = Receipt.objects.all()
    serializer_class = ReceiptSerializer
    search_fields = ['receipt_number', 'reference', 'notes', 'debtor__name']
    filterset_fields = ['debtor', 'invoice', 'bank_account', 'payment_method']

    @action(detail=False, methods=['get'], url_path='open-invoices')
    def open_invoices(self, request):
        """Invoices of a debtor that can still be settled (?debtor=)"""
        from apps.invoices.api.serializers import InvoiceListSerializer
        return self._open_documents(request, 'debtor', 'invoices', InvoiceListSerializer)
