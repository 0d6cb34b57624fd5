import logging
from decimal import Decimal

from django.db import models

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class Contact(models.Model):
    """Shared fields for the people a business trades with"""
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=50, blank=True, default='')
    address = models.TextField(blank=True, default='')
    outstanding_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=ZERO,
        help_text='Maintained by bookkeeping services; never negative'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name

    @classmethod
    def adjust_outstanding(cls, pk, delta):
        """
        Move a contact's outstanding amount by ``delta`` (floored at zero).
        Locks the row; call inside transaction.atomic().
        """
        if pk is None or not delta:
            return None
        contact = cls.objects.select_for_update().get(pk=pk)
        previous = contact.outstanding_amount
        contact.outstanding_amount = max(ZERO, previous + Decimal(delta))
        contact.save(update_fields=['outstanding_amount', 'updated_at'])
        logger.info(
            f"{cls.__name__} {contact.pk} outstanding {previous} -> {contact.outstanding_amount}"
        )
        return contact


class Creditor(Contact):
    """Someone the business owes money to (supplier)"""
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='creditors')

    class Meta(Contact.Meta):
        db_table = 'creditors'


class Debtor(Contact):
    """Someone who owes the business money (customer)"""
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='debtors')

    class Meta(Contact.Meta):
        db_table = 'debtors'
