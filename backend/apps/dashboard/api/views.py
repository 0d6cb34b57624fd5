from django.db.models import Sum, Count, Q
from rest_framework.views import APIView
from rest_framework.response import Response

from apps.api.formatting import money
from apps.bank_accounts.models import BankAccount
from apps.businesses.scoping import resolve_business
from apps.contacts.models import Creditor, Debtor
from apps.invoices.api.serializers import InvoiceListSerializer
from apps.invoices.models import Invoice, Bill
from apps.payments.api.serializers import ReceiptSerializer
from apps.payments.models import Receipt
from apps.purchases.models import Purchase

RECENT_LIMIT = 5


def _total(queryset, field):
    return queryset.aggregate(total=Sum(field))['total'] or 0


class DashboardAPIView(APIView):
    """
    Headline figures for the active business.
    Income is what debtors have paid in, expenses are the recorded purchases.
    """

    def get(self, request):
        business = resolve_business(request)

        receipts = Receipt.objects.filter(business=business)
        invoices = Invoice.objects.filter(business=business)
        bills = Bill.objects.filter(business=business)

        income = _total(receipts, 'amount')
        expenses = _total(Purchase.objects.filter(business=business), 'total_price')

        invoice_counts = invoices.aggregate(
            total=Count('id'),
            open=Count('id', filter=Q(status__in=Invoice.OPEN_STATUSES)),
            overdue=Count('id', filter=Q(status=Invoice.OVERDUE)),
        )
        bill_counts = bills.aggregate(
            total=Count('id'),
            open=Count('id', filter=Q(status__in=Bill.OPEN_STATUSES)),
        )

        recent_invoices = invoices.select_related('debtor').order_by('-issue_date', '-created_at')[:RECENT_LIMIT]
        recent_receipts = receipts.select_related(
            'debtor', 'invoice', 'bank_account'
        ).order_by('-payment_date', '-created_at')[:RECENT_LIMIT]

        return Response({
            'business': {'id': business.id, 'name': business.name},
            'income': money(income),
            'expenses': money(expenses),
            'net_income': money(income - expenses),
            'total_receivable': money(_total(Debtor.objects.filter(business=business), 'outstanding_amount')),
            'total_payable': money(_total(Creditor.objects.filter(business=business), 'outstanding_amount')),
            'total_bank_balance': money(_total(BankAccount.objects.filter(business=business), 'current_balance')),
            'counts': {
                'bank_accounts': BankAccount.objects.filter(business=business).count(),
                'debtors': Debtor.objects.filter(business=business).count(),
                'creditors': Creditor.objects.filter(business=business).count(),
                'invoices': invoice_counts['total'],
                'open_invoices': invoice_counts['open'],
                'overdue_invoices': invoice_counts['overdue'],
                'bills': bill_counts['total'],
                'open_bills': bill_counts['open'],
            },
            'recent_invoices': InvoiceListSerializer(recent_invoices, many=True).data,
            'recent_receipts': ReceiptSerializer(recent_receipts, many=True).data,
        })
