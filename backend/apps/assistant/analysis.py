"""
One-shot financial analysis over a time window.

The data for the window is gathered per analysis type, sent to the model
with formatting instructions and the reply decoded as JSON.
"""
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from apps.bank_accounts.models import BankAccount, BankTransaction
from apps.contacts.models import Creditor, Debtor
from apps.payments.models import Payment, Receipt
from . import client
from .context import to_json

TIME_RANGE_DAYS = {
    'week': 7,
    'month': 30,
    'quarter': 90,
    'year': 365,
}

BANK = 'bank'
CREDITOR = 'creditor'
DEBTOR = 'debtor'
GENERAL = 'general'

ANALYSIS_TYPES = [BANK, CREDITOR, DEBTOR, GENERAL]

# Types analysing one record, and where that record lives
ENTITY_MODELS = {
    BANK: BankAccount,
    CREDITOR: Creditor,
    DEBTOR: Debtor,
}

SYSTEM_PROMPT = (
    "You are a financial analyst AI assistant. "
    "Analyze the data and provide insights in the requested format."
)

FORMAT_INSTRUCTIONS = (
    "Please provide a detailed analysis including:\n"
    "1. A clear title for the analysis\n"
    "2. A summary of key findings\n"
    "3. Detailed metrics with trends where applicable\n"
    "4. Any relevant charts or visualizations\n"
    "Format the response as a JSON object with the keys "
    '"title" (string), "summary" (string), '
    '"details" (list of {"label": string, "value": string, '
    '"trend": optional {"value": number, "label": string, "positive": boolean}}) and '
    '"chart" (optional {"labels": list of strings, "values": list of numbers}).'
)


def window_start(time_range):
    return timezone.localdate() - timedelta(days=TIME_RANGE_DAYS[time_range])


def _transactions(business, since, **filters):
    queryset = BankTransaction.objects.filter(business=business, date__gte=since, **filters)
    return list(queryset.values(
        'transaction_number', 'transaction_type', 'amount', 'date', 'description',
        'category', 'reconciled', 'account__name'
    ))


def _settlements(model, business, since, **filters):
    queryset = model.objects.filter(business=business, payment_date__gte=since, **filters)
    return list(queryset.values(
        model.number_field, f'{model.contact_field}__name', 'amount', 'payment_date',
        'payment_method', 'reference'
    ))


def gather_data(business, analysis_type, time_range, entity=None):
    since = window_start(time_range)

    if analysis_type == BANK:
        return _transactions(business, since, account=entity)
    if analysis_type == CREDITOR:
        return _settlements(Payment, business, since, creditor=entity)
    if analysis_type == DEBTOR:
        return _settlements(Receipt, business, since, debtor=entity)
    return {
        'transactions': _transactions(business, since),
        'payments': _settlements(Payment, business, since),
        'receipts': _settlements(Receipt, business, since),
    }


def build_prompt(data, time_range, custom_query=None):
    if custom_query:
        prompt = f'Analyze the following financial data and answer this question: "{custom_query}"\n\n'
    else:
        prompt = f'Analyze the following financial data for the last {time_range} and provide insights:\n\n'
    prompt += f"Data: {to_json(data)}\n\n"
    return prompt + FORMAT_INSTRUCTIONS


def run_analysis(business, analysis_type, time_range, entity=None, custom_query=None):
    data = gather_data(business, analysis_type, time_range, entity)
    reply = client.complete(
        [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': build_prompt(data, time_range, custom_query)},
        ],
        api_key=settings.OPENAI_API_KEY,
        model=settings.ASSISTANT_ANALYSIS_MODEL,
        temperature=settings.ASSISTANT_ANALYSIS_TEMPERATURE,
        max_tokens=settings.ASSISTANT_ANALYSIS_MAX_TOKENS,
    )
    return client.parse_json_reply(reply)
