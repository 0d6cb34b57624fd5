"""
Payment and receipt bookkeeping.

A payment lowers its creditor's outstanding balance, may settle a bill and,
when made by bank transfer, is mirrored by a withdrawal on the chosen bank
account. Receipts do the same for debtors, invoices and deposits. Every
operation runs in one database transaction.
"""
import logging

from django.db import transaction

from apps.bank_accounts.models import BankTransaction
from .models import Payment, Receipt

logger = logging.getLogger(__name__)


class SettlementRules:
    """What differs between paying a creditor and receiving from a debtor"""

    def __init__(self, model, transaction_type, category, number_prefix,
                 counterparty_phrase, anonymous_phrase, document_label, link_field):
        self.model = model
        self.transaction_type = transaction_type
        self.category = category
        self.number_prefix = number_prefix
        self.counterparty_phrase = counterparty_phrase
        self.anonymous_phrase = anonymous_phrase
        self.document_label = document_label
        self.link_field = link_field

    def contact_model(self):
        return self.model._meta.get_field(self.model.contact_field).related_model

    def describe(self, settlement):
        contact = settlement.contact
        if contact is not None:
            description = f"{self.counterparty_phrase} {contact.name}"
        else:
            description = self.anonymous_phrase
        document = settlement.document
        if document is not None:
            description += f" for {self.document_label} {document.number}"
        return description


PAYMENT_RULES = SettlementRules(
    model=Payment,
    transaction_type=BankTransaction.WITHDRAWAL,
    category='Payment',
    number_prefix='WIT',
    counterparty_phrase='Payment to',
    anonymous_phrase='Payment made',
    document_label='bill',
    link_field='payment',
)

RECEIPT_RULES = SettlementRules(
    model=Receipt,
    transaction_type=BankTransaction.DEPOSIT,
    category='Payment Receipt',
    number_prefix='DEP',
    counterparty_phrase='Payment from',
    anonymous_phrase='Payment received',
    document_label='invoice',
    link_field='receipt',
)


def rules_for(settlement):
    return PAYMENT_RULES if isinstance(settlement, Payment) else RECEIPT_RULES


def _settle_document(settlement):
    """A settlement covering the whole document total marks it PAID"""
    document = settlement.document
    if document is not None and document.is_open and settlement.amount >= document.total_amount:
        document.status = document.PAID
        document.save(update_fields=['status', 'updated_at'])
        logger.info(f"{type(document).__name__} {document.number} paid by {settlement.number}")


def sync_bank_transaction(settlement):
    """
    Keep the linked bank transaction in step with the settlement.

    Bank Transfer settlements with an account get a transaction (created or
    updated); any other method has its transaction removed.
    """
    rules = rules_for(settlement)
    linked = BankTransaction.objects.filter(**{rules.link_field: settlement}).first()

    if not settlement.uses_bank:
        if linked is not None:
            logger.info(f"{settlement.number} no longer paid by bank, removing {linked.transaction_number}")
            linked.delete()
        return None

    values = {
        'account': settlement.bank_account,
        'amount': settlement.amount,
        'date': settlement.payment_date,
        'description': rules.describe(settlement),
        'notes': settlement.notes,
    }

    if linked is None:
        linked = BankTransaction.objects.create(
            business_id=settlement.business_id,
            transaction_type=rules.transaction_type,
            transaction_number=f"{rules.number_prefix}-{settlement.number}",
            category=rules.category,
            reconciled=False,
            **{rules.link_field: settlement},
            **values
        )
        logger.info(f"{settlement.number}: bank transaction {linked.transaction_number} created")
        return linked

    for field, value in values.items():
        setattr(linked, field, value)
    linked.save()
    return linked


def record_settlement(model, business, create_bank_transaction=True, **data):
    """Create a payment or receipt and apply its bookkeeping"""
    rules = PAYMENT_RULES if model is Payment else RECEIPT_RULES

    if create_bank_transaction:
        data['payment_method'] = model.BANK_TRANSFER
    elif not data.get('payment_method'):
        data['payment_method'] = model.OTHER

    with transaction.atomic():
        settlement = model.objects.create(business=business, **data)
        rules.contact_model().adjust_outstanding(settlement.contact_id, -settlement.amount)
        _settle_document(settlement)
        sync_bank_transaction(settlement)

    logger.info(f"{model.__name__} {settlement.number} recorded for {settlement.amount}")
    return settlement


def update_settlement(settlement, **data):
    """
    Apply edits, moving outstanding balances between contacts and keeping the
    linked bank transaction in step
    """
    rules = rules_for(settlement)
    contact_model = rules.contact_model()

    with transaction.atomic():
        old_contact_id = settlement.contact_id
        old_amount = settlement.amount

        for field, value in data.items():
            setattr(settlement, field, value)
        settlement.save()

        new_contact_id = settlement.contact_id
        if old_contact_id != new_contact_id:
            contact_model.adjust_outstanding(old_contact_id, old_amount)
            contact_model.adjust_outstanding(new_contact_id, -settlement.amount)
        elif settlement.amount != old_amount:
            contact_model.adjust_outstanding(new_contact_id, -(settlement.amount - old_amount))

        _settle_document(settlement)
        sync_bank_transaction(settlement)

    logger.info(f"{type(settlement).__name__} {settlement.number} updated")
    return settlement


def delete_settlement(settlement):
    """Delete a payment or receipt; the amount goes back on the contact and the bank transaction is removed"""
    rules = rules_for(settlement)
    number = settlement.number
    with transaction.atomic():
        rules.contact_model().adjust_outstanding(settlement.contact_id, settlement.amount)
        # Cascades to the linked bank transaction, whose balance effect is reversed
        settlement.delete()
    logger.info(f"{type(settlement).__name__} {number} deleted")
