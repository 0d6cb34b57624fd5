"""
Purchase bookkeeping: a purchase's total is owed to its creditor until paid.
"""
import logging

from django.db import transaction

from apps.contacts.models import Creditor
from .models import Purchase

logger = logging.getLogger(__name__)


def create_purchase(business, **data):
    with transaction.atomic():
        purchase = Purchase.objects.create(business=business, **data)
        Creditor.adjust_outstanding(purchase.creditor_id, purchase.total_price)
    logger.info(f"Purchase {purchase.purchase_number} created for {purchase.total_price}")
    return purchase


def update_purchase(purchase, **data):
    """Apply edits; a new creditor takes over the total, otherwise the creditor moves by the difference"""
    with transaction.atomic():
        old_creditor_id = purchase.creditor_id
        old_total = purchase.total_price

        for field, value in data.items():
            setattr(purchase, field, value)
        purchase.save()

        if old_creditor_id != purchase.creditor_id:
            Creditor.adjust_outstanding(old_creditor_id, -old_total)
            Creditor.adjust_outstanding(purchase.creditor_id, purchase.total_price)
        elif purchase.total_price != old_total:
            Creditor.adjust_outstanding(purchase.creditor_id, purchase.total_price - old_total)

    logger.info(f"Purchase {purchase.purchase_number} updated, total {old_total} -> {purchase.total_price}")
    return purchase


def delete_purchase(purchase):
    number = purchase.purchase_number
    with transaction.atomic():
        Creditor.adjust_outstanding(purchase.creditor_id, -purchase.total_price)
        purchase.delete()
    logger.info(f"Purchase {number} deleted")
