"""
Business snapshot handed to the chat assistant as context.
"""
import json
from datetime import timedelta

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from apps.bank_accounts.models import BankAccount, BankTransaction
from apps.contacts.models import Creditor, Debtor
from apps.invoices.models import Invoice, InvoiceItem, Bill, BillItem
from apps.payments.models import Payment, Receipt
from apps.purchases.models import Purchase

SYSTEM_PROMPT = (
    "You are TallyAI, an AI assistant for the accounting platform AccuBooks. "
    "You help users analyze their financial data and provide insights."
)


def _rows(queryset, *extra, limit=None):
    rows = queryset.values(*[f.attname for f in queryset.model._meta.concrete_fields], *extra)
    if limit is not None:
        rows = rows[:limit]
    return list(rows)


def _documents_with_items(document_model, item_model, business):
    parent = document_model._meta.model_name
    items = {}
    for item in _rows(item_model.objects.filter(**{f'{parent}__business': business})):
        items.setdefault(item[f'{parent}_id'], []).append(item)

    documents = _rows(document_model.objects.filter(business=business))
    for document in documents:
        document['items'] = items.get(document['id'], [])
    return documents


def build_business_snapshot(business):
    debtors = _rows(Debtor.objects.filter(business=business))
    creditors = _rows(Creditor.objects.filter(business=business))
    bank_accounts = _rows(BankAccount.objects.filter(business=business))
    bank_transactions = _rows(
        BankTransaction.objects.filter(business=business).order_by('-date', '-created_at'),
        'account__name',
        limit=settings.ASSISTANT_TRANSACTION_LIMIT,
    )

    since = timezone.localdate() - timedelta(days=settings.ASSISTANT_RECENT_DAYS)
    recent_transactions = [txn for txn in bank_transactions if txn['date'] >= since]

    return {
        'business': {
            'id': business.id,
            'name': business.name,
            'address': business.address,
            'email': business.email,
            'phone': business.phone,
            'tax_id': business.tax_id,
        },
        'debtors': debtors,
        'creditors': creditors,
        'invoices': _documents_with_items(Invoice, InvoiceItem, business),
        'bills': _documents_with_items(Bill, BillItem, business),
        'payments': _rows(Payment.objects.filter(business=business)),
        'receipts': _rows(Receipt.objects.filter(business=business)),
        'purchases': _rows(Purchase.objects.filter(business=business)),
        'bank_accounts': bank_accounts,
        'bank_transactions': bank_transactions,
        'total_receivable': sum(d['outstanding_amount'] for d in debtors),
        'total_payable': sum(c['outstanding_amount'] for c in creditors),
        'total_bank_balance': sum(a['current_balance'] for a in bank_accounts),
        'recent_transactions': recent_transactions,
    }


def to_json(data):
    return json.dumps(data, cls=DjangoJSONEncoder, indent=2)


def system_prompt(business):
    return f"{SYSTEM_PROMPT}\n\nCurrent business context:\n{to_json(build_business_snapshot(business))}"
