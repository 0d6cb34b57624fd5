"""
Invoice and bill bookkeeping.

Invoices raise a debtor's outstanding balance and bills raise a creditor's.
Creating, editing, settling and deleting a document moves that balance in
the same database transaction as the document itself.
"""
import logging

from django.db import transaction

from .models import Invoice, InvoiceItem, BillItem, ZERO

logger = logging.getLogger(__name__)

ITEM_FIELDS = ['description', 'quantity', 'unit_price']


def _item_model(document):
    return InvoiceItem if isinstance(document, Invoice) else BillItem


def _contact_model(document):
    return type(document)._meta.get_field(document.contact_field).related_model


def _adjust(document, contact_id, delta):
    _contact_model(document).adjust_outstanding(contact_id, delta)


def _write_items(document, items):
    """
    Sync line items: rows with a known id are updated, rows without an id are
    inserted and existing rows missing from ``items`` are deleted
    """
    item_model = _item_model(document)
    parent_field = type(document)._meta.model_name
    existing = {item.pk: item for item in item_model.objects.filter(**{parent_field: document})}

    kept = set()
    for data in items:
        item_id = data.get('id')
        if item_id in existing:
            item = existing[item_id]
            kept.add(item_id)
        else:
            item = item_model(**{parent_field: document})
        for field in ITEM_FIELDS:
            setattr(item, field, data[field])
        item.save()

    removed = [pk for pk in existing if pk not in kept]
    if removed:
        item_model.objects.filter(pk__in=removed).delete()

    total = sum((item.total_price for item in item_model.objects.filter(**{parent_field: document})), ZERO)
    document.total_amount = total
    document.save(update_fields=['total_amount', 'updated_at'])
    return total


def create_document(model, business, items, **data):
    """Create an invoice or bill with its items and add the total to the contact's outstanding"""
    with transaction.atomic():
        document = model.objects.create(business=business, **data)
        total = _write_items(document, items)
        _adjust(document, document.contact_id, total)
    logger.info(f"{model.__name__} {document.number} created for {total}")
    return document


def update_document(document, items=None, **data):
    """
    Apply edits and move outstanding balances.

    A changed contact has the old total removed (floored at zero) and the new
    total added to the new contact; otherwise the contact moves by the change
    in total.
    """
    with transaction.atomic():
        old_contact_id = document.contact_id
        old_total = document.total_amount

        for field, value in data.items():
            setattr(document, field, value)
        document.save()

        new_total = _write_items(document, items) if items is not None else document.total_amount
        new_contact_id = document.contact_id

        if old_contact_id != new_contact_id:
            _adjust(document, old_contact_id, -old_total)
            _adjust(document, new_contact_id, new_total)
        elif new_total != old_total:
            _adjust(document, new_contact_id, new_total - old_total)

    logger.info(f"{type(document).__name__} {document.number} updated, total {old_total} -> {new_total}")
    return document


def mark_paid(document):
    """Settle a document outside the payment flow; whatever is still due leaves the outstanding balance"""
    with transaction.atomic():
        due = document.amount_due()
        document.status = document.PAID
        document.save(update_fields=['status', 'updated_at'])
        _adjust(document, document.contact_id, -due)
    logger.info(f"{type(document).__name__} {document.number} marked as paid ({due} settled)")
    return document


def delete_document(document):
    """Delete a document; an unpaid one takes its remaining amount off the outstanding balance"""
    with transaction.atomic():
        if document.is_open:
            _adjust(document, document.contact_id, -document.amount_due())
        number = document.number
        document.delete()
    logger.info(f"{type(document).__name__} {number} deleted")


def cancel_document(document):
    """Void an open document; its remaining amount leaves the outstanding balance"""
    with transaction.atomic():
        due = document.amount_due()
        document.status = document.CANCELLED
        document.save(update_fields=['status', 'updated_at'])
        _adjust(document, document.contact_id, -due)
    logger.info(f"{type(document).__name__} {document.number} cancelled ({due} written off)")
    return document


def mark_overdue(queryset, today):
    """Flag pending documents past their due date as OVERDUE; returns the number updated"""
    return queryset.filter(status=queryset.model.PENDING, due_date__lt=today).update(status=queryset.model.OVERDUE)
