import logging

from django.db.models import Count, Sum, Q
from django.db.models.deletion import RestrictedError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from ..models import Creditor, Debtor
from .serializers import CreditorSerializer, DebtorSerializer
from apps.api.formatting import money
from apps.api.pagination import StandardResultsSetPagination
from apps.api.permissions import IsBusinessOwner
from apps.businesses.scoping import BusinessScopedViewSetMixin

logger = logging.getLogger(__name__)


class ContactViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """Common CRUD behaviour for creditors and debtors"""
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]

    search_fields = ['name', 'email', 'phone']
    ordering_fields = ['name', 'outstanding_amount', 'created_at']
    ordering = ['name']

    def list(self, request, *args, **kwargs):
        """Enhanced list view with outstanding summary"""
        response = super().list(request, *args, **kwargs)

        if hasattr(response, 'data') and 'results' in response.data:
            summary = self.get_queryset().aggregate(
                total_contacts=Count('id'),
                total_outstanding=Sum('outstanding_amount'),
                with_balance=Count('id', filter=Q(outstanding_amount__gt=0)),
            )
            response.data['summary'] = {
                'total_contacts': summary['total_contacts'] or 0,
                'contacts_with_balance': summary['with_balance'] or 0,
                'total_outstanding': money(summary['total_outstanding']),
            }

        return response

    def destroy(self, request, *args, **kwargs):
        contact = self.get_object()
        try:
            contact.delete()
        except RestrictedError:
            return Response(
                {'error': f'{contact.name} has linked documents and cannot be deleted'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class CreditorViewSet(ContactViewSet):
    """ViewSet for Creditor CRUD operations with account statement"""
    queryset = Creditor.objects.all()
    serializer_class = CreditorSerializer

    @action(detail=True, methods=['get'])
    def statement(self, request, pk=None):
        """Purchases, bills and payments for a creditor; balance = purchases - payments"""
        creditor = self.get_object()

        from apps.invoices.api.serializers import BillListSerializer
        from apps.payments.api.serializers import PaymentSerializer
        from apps.purchases.api.serializers import PurchaseSerializer

        purchases = creditor.purchases.order_by('-purchase_date', '-created_at')
        payments = creditor.payments.select_related('bank_account', 'bill').order_by('-payment_date', '-created_at')
        bills = creditor.bills.order_by('-issue_date', '-created_at')

        total_purchases = purchases.aggregate(total=Sum('total_price'))['total'] or 0
        total_payments = payments.aggregate(total=Sum('amount'))['total'] or 0
        total_billed = bills.aggregate(total=Sum('total_amount'))['total'] or 0

        return Response({
            'creditor': CreditorSerializer(creditor).data,
            'purchases': PurchaseSerializer(purchases, many=True).data,
            'payments': PaymentSerializer(payments, many=True).data,
            'bills': BillListSerializer(bills, many=True).data,
            'total_purchases': money(total_purchases),
            'total_payments': money(total_payments),
            'total_billed': money(total_billed),
            'balance': money(total_purchases - total_payments),
        })


class DebtorViewSet(ContactViewSet):
    """ViewSet for Debtor CRUD operations with account statement"""
    queryset = Debtor.objects.all()
    serializer_class = DebtorSerializer

    @action(detail=True, methods=['get'])
    def statement(self, request, pk=None):
        """Invoices and receipts for a debtor; balance = invoiced - received"""
        debtor = self.get_object()

        from apps.invoices.api.serializers import InvoiceListSerializer
        from apps.payments.api.serializers import ReceiptSerializer

        invoices = debtor.invoices.order_by('-issue_date', '-created_at')
        receipts = debtor.receipts.select_related('bank_account', 'invoice').order_by('-payment_date', '-created_at')

        total_invoiced = invoices.aggregate(total=Sum('total_amount'))['total'] or 0
        total_received = receipts.aggregate(total=Sum('amount'))['total'] or 0

        return Response({
            'debtor': DebtorSerializer(debtor).data,
            'invoices': InvoiceListSerializer(invoices, many=True).data,
            'receipts': ReceiptSerializer(receipts, many=True).data,
            'total_invoiced': money(total_invoiced),
            'total_received': money(total_received),
            'balance': money(total_invoiced - total_received),
        })
