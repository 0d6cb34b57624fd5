from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models, transaction

from apps.businesses.numbering import lock_numbering, next_document_number


class Settlement(models.Model):
    """Money moving between the business and a contact"""
    BANK_TRANSFER = 'Bank Transfer'
    CASH = 'Cash'
    CHEQUE = 'Cheque'
    CARD = 'Card'
    OTHER = 'Other'

    PAYMENT_METHOD_CHOICES = [
        (BANK_TRANSFER, 'Bank Transfer'),
        (CASH, 'Cash'),
        (CHEQUE, 'Cheque'),
        (CARD, 'Card'),
        (OTHER, 'Other'),
    ]

    amount = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    payment_date = models.DateField()
    payment_method = models.CharField(max_length=30, choices=PAYMENT_METHOD_CHOICES, default=OTHER)
    reference = models.CharField(max_length=100, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Set by subclasses
    contact_field = None
    document_field = None
    number_field = None
    number_prefix = None

    class Meta:
        abstract = True
        ordering = ['-payment_date', '-created_at']

    def __str__(self):
        return f"{self.number} - {self.amount}"

    @property
    def number(self):
        return getattr(self, self.number_field)

    @property
    def contact(self):
        return getattr(self, self.contact_field)

    @property
    def contact_id(self):
        return getattr(self, f'{self.contact_field}_id')

    @property
    def document(self):
        return getattr(self, self.document_field)

    @property
    def uses_bank(self):
        """Bank Transfer settlements with an account carry a linked bank transaction"""
        return self.payment_method == self.BANK_TRANSFER and self.bank_account_id is not None

    def save(self, *args, **kwargs):
        if self.number:
            super().save(*args, **kwargs)
            return

        with transaction.atomic():
            lock_numbering(self.business_id)
            setattr(self, self.number_field, next_document_number(
                type(self).objects.filter(business_id=self.business_id),
                self.number_field,
                self.number_prefix,
            ))
            super().save(*args, **kwargs)


class Payment(Settlement):
    """Money paid out to a creditor, optionally against one of their bills"""
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='payments')
    creditor = models.ForeignKey(
        'contacts.Creditor', on_delete=models.RESTRICT, null=True, blank=True, related_name='payments'
    )
    bill = models.ForeignKey(
        'invoices.Bill', on_delete=models.SET_NULL, null=True, blank=True, related_name='payments'
    )
    bank_account = models.ForeignKey(
        'bank_accounts.BankAccount', on_delete=models.SET_NULL, null=True, blank=True, related_name='payments'
    )
    payment_number = models.CharField(max_length=50, blank=True)

    contact_field = 'creditor'
    document_field = 'bill'
    number_field = 'payment_number'
    number_prefix = 'PAY'

    class Meta(Settlement.Meta):
        db_table = 'payments'
        constraints = [
            models.UniqueConstraint(fields=['business', 'payment_number'], name='unique_payment_number_per_business'),
        ]


class Receipt(Settlement):
    """Money received from a debtor, optionally against one of their invoices"""
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='receipts')
    debtor = models.ForeignKey(
        'contacts.Debtor', on_delete=models.RESTRICT, null=True, blank=True, related_name='receipts'
    )
    invoice = models.ForeignKey(
        'invoices.Invoice', on_delete=models.SET_NULL, null=True, blank=True, related_name='receipts'
    )
    bank_account = models.ForeignKey(
        'bank_accounts.BankAccount', on_delete=models.SET_NULL, null=True, blank=True, related_name='receipts'
    )
    receipt_number = models.CharField(max_length=50, blank=True)

    contact_field = 'debtor'
    document_field = 'invoice'
    number_field = 'receipt_number'
    number_prefix = 'REC'

    class Meta(Settlement.Meta):
        db_table = 'payment_receipts'
        constraints = [
            models.UniqueConstraint(fields=['business', 'receipt_number'], name='unique_receipt_number_per_business'),
        ]
