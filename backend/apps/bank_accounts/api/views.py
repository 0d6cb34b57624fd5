import logging
from decimal import Decimal, InvalidOperation

from django.db.models import Q, Sum, Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters, status, mixins
from rest_framework.decorators import action
from rest_framework.response import Response

from ..models import BankAccount, BankTransaction, BankReconciliation
from .. import services
from .serializers import (
    BankAccountSerializer, BankAccountListSerializer,
    BankTransactionSerializer, BankTransactionListSerializer,
    BankReconciliationSerializer, ReconcileRequestSerializer
)
from apps.api.formatting import money
from apps.api.pagination import StandardResultsSetPagination
from apps.api.permissions import IsBusinessOwner
from apps.businesses.scoping import BusinessScopedViewSetMixin

logger = logging.getLogger(__name__)


class BankAccountViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """ViewSet for BankAccount CRUD operations with reconciliation"""
    queryset = BankAccount.objects.all()
    serializer_class = BankAccountSerializer
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]

    search_fields = ['name', 'account_number']
    filterset_fields = ['account_type']
    ordering_fields = ['name', 'current_balance', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        if self.action == 'list':
            return BankAccountListSerializer
        return BankAccountSerializer

    def list(self, request, *args, **kwargs):
        """Enhanced list view with balance summary"""
        response = super().list(request, *args, **kwargs)

        if hasattr(response, 'data') and 'results' in response.data:
            summary = self.get_queryset().aggregate(
                total_accounts=Count('id'),
                total_balance=Sum('current_balance'),
            )
            response.data['summary'] = {
                'total_accounts': summary['total_accounts'] or 0,
                'total_balance': money(summary['total_balance']),
            }

        return response

    def perform_destroy(self, instance):
        services.delete_account(instance)

    @action(detail=True, methods=['get'])
    def transactions(self, request, pk=None):
        """Transactions for one account, newest first"""
        account = self.get_object()
        transactions = account.transactions.select_related('account').order_by('-date', '-created_at')

        page = self.paginate_queryset(transactions)
        if page is not None:
            serializer = BankTransactionListSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = BankTransactionListSerializer(transactions, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def reconciliation(self, request, pk=None):
        """
        Reconciliation worksheet: every transaction of the account with its
        reconciled flag and the difference against a statement balance
        (defaults to the current balance)
        """
        account = self.get_object()

        raw_balance = request.query_params.get('statement_balance')
        try:
            statement_balance = Decimal(raw_balance) if raw_balance not in (None, '') else account.current_balance
        except InvalidOperation:
            return Response(
                {'error': 'statement_balance must be a number'},
                status=status.HTTP_400_BAD_REQUEST
            )

        difference, cleared_balance = services.reconciliation_difference(account, statement_balance)
        transactions = account.transactions.order_by('date', 'created_at')

        return Response({
            'account': BankAccountListSerializer(account).data,
            'statement_balance': money(statement_balance),
            'cleared_balance': money(cleared_balance),
            'difference': money(difference),
            'is_balanced': difference == 0,
            'transactions': BankTransactionListSerializer(transactions, many=True).data,
        })

    @action(detail=True, methods=['post'])
    def reconcile(self, request, pk=None):
        """Save a reconciliation: selected transactions reconciled, all others not"""
        account = self.get_object()
        serializer = ReconcileRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reconciliation = services.reconcile_account(
            account,
            serializer.validated_data['statement_balance'],
            serializer.validated_data['statement_date'],
            serializer.validated_data['transaction_ids'],
            user=request.user,
        )

        return Response(BankReconciliationSerializer(reconciliation).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def recalculate(self, request, pk=None):
        """Rebuild current_balance from the opening balance and the ledger"""
        account = self.get_object()
        old_balance, new_balance = services.recalculate_balance(account)
        if old_balance != new_balance:
            logger.warning(f"Account {account.pk} balance corrected from {old_balance} to {new_balance}")
        return Response({
            'previous_balance': money(old_balance),
            'current_balance': money(new_balance),
            'corrected': old_balance != new_balance,
        })


class BankTransactionViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for BankTransaction CRUD operations with advanced filtering.
    Creating a transfer also creates its paired deposit; edits and deletes keep both sides in step.
    """
    queryset = BankTransaction.objects.all()
    serializer_class = BankTransactionSerializer
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]

    # Search fields for ?search= parameter
    search_fields = ['transaction_number', 'description', 'category', 'notes']

    # Filter fields for ?field=value parameters
    filterset_fields = ['transaction_type', 'account', 'reconciled', 'category']

    # Ordering fields for ?ordering= parameter
    ordering_fields = ['date', 'amount', 'transaction_number', 'created_at']
    ordering = ['-date', '-created_at']

    def get_queryset(self):
        """Customize queryset with optimizations and filters"""
        queryset = super().get_queryset().select_related(
            'account', 'destination_account', 'transfer_source', 'payment', 'receipt'
        )

        # Date range filters
        start_date = self.request.query_params.get('start_date', None)
        end_date = self.request.query_params.get('end_date', None)

        if start_date:
            queryset = queryset.filter(date__gte=start_date)
        if end_date:
            queryset = queryset.filter(date__lte=end_date)

        # Amount range filters
        min_amount = self.request.query_params.get('min_amount', None)
        max_amount = self.request.query_params.get('max_amount', None)

        if min_amount:
            queryset = queryset.filter(amount__gte=min_amount)
        if max_amount:
            queryset = queryset.filter(amount__lte=max_amount)

        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions"""
        if self.action == 'list':
            return BankTransactionListSerializer
        return BankTransactionSerializer

    def list(self, request, *args, **kwargs):
        """Enhanced list view with transaction summary metadata"""
        response = super().list(request, *args, **kwargs)

        if hasattr(response, 'data') and 'results' in response.data:
            current_queryset = self.filter_queryset(self.get_queryset())

            summary = current_queryset.aggregate(
                total_transactions=Count('id'),
                deposits_amount=Sum('amount', filter=Q(transaction_type=BankTransaction.DEPOSIT)),
                withdrawals_amount=Sum('amount', filter=Q(transaction_type=BankTransaction.WITHDRAWAL)),
                transfers_amount=Sum('amount', filter=Q(transaction_type=BankTransaction.TRANSFER)),
                reconciled_amount=Sum('amount', filter=Q(reconciled=True)),
                unreconciled_amount=Sum('amount', filter=Q(reconciled=False)),
                unreconciled_count=Count('id', filter=Q(reconciled=False)),
            )

            response.data['summary'] = {
                'total_transactions': summary['total_transactions'] or 0,
                'deposits_amount': money(summary['deposits_amount']),
                'withdrawals_amount': money(summary['withdrawals_amount']),
                'transfers_amount': money(summary['transfers_amount']),
                'reconciled_amount': money(summary['reconciled_amount']),
                'unreconciled_amount': money(summary['unreconciled_amount']),
                'unreconciled_count': summary['unreconciled_count'] or 0,
            }

        return response

    def perform_create(self, serializer):
        serializer.instance = services.create_transaction(self.get_business(), **serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = services.update_transaction(serializer.instance, **serializer.validated_data)

    def perform_destroy(self, instance):
        services.delete_transaction(instance)

    @action(detail=True, methods=['post'])
    def reconcile(self, request, pk=None):
        """Mark transaction as reconciled"""
        transaction = self.get_object()

        if transaction.reconciled:
            return Response(
                {'error': 'Transaction is already reconciled'},
                status=status.HTTP_400_BAD_REQUEST
            )

        services.set_reconciled(transaction, True)
        return Response({
            'message': f'Transaction {transaction.transaction_number} has been marked as reconciled',
            'reconciled': True
        })

    @action(detail=True, methods=['post'])
    def unreconcile(self, request, pk=None):
        """Clear the reconciled flag"""
        transaction = self.get_object()

        if not transaction.reconciled:
            return Response(
                {'error': 'Transaction is not reconciled'},
                status=status.HTTP_400_BAD_REQUEST
            )

        services.set_reconciled(transaction, False)
        return Response({
            'message': f'Transaction {transaction.transaction_number} has been marked as unreconciled',
            'reconciled': False
        })


class BankReconciliationViewSet(BusinessScopedViewSetMixin, mixins.ListModelMixin,
                                mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Read-only history of completed reconciliations"""
    queryset = BankReconciliation.objects.select_related('account', 'reconciled_by')
    serializer_class = BankReconciliationSerializer
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['account']
    ordering_fields = ['statement_date', 'created_at']
    ordering = ['-statement_date', '-created_at']
