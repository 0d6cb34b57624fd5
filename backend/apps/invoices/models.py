from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import Sum
from django.utils import timezone

from apps.businesses.numbering import lock_numbering, next_document_number

ZERO = Decimal('0.00')


class Document(models.Model):
    """Fields shared by invoices (sent to debtors) and bills (received from creditors)"""
    PENDING = 'PENDING'
    PAID = 'PAID'
    OVERDUE = 'OVERDUE'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
        (OVERDUE, 'Overdue'),
        (CANCELLED, 'Cancelled'),
    ]

    # Statuses whose remaining amount still counts towards the contact's outstanding balance
    OPEN_STATUSES = [PENDING, OVERDUE]

    issue_date = models.DateField()
    due_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=ZERO)
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Set by subclasses
    contact_field = None
    number_field = None
    number_prefix = None
    settlements_name = None

    class Meta:
        abstract = True
        ordering = ['-issue_date', '-created_at']

    def __str__(self):
        return self.number

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
    def is_open(self):
        return self.status in self.OPEN_STATUSES

    @property
    def is_overdue(self):
        if self.status == self.OVERDUE:
            return True
        return self.status == self.PENDING and self.due_date < timezone.localdate()

    def amount_settled(self):
        """Total of the payments or receipts recorded against this document"""
        if self.pk is None:
            return ZERO
        return getattr(self, self.settlements_name).aggregate(total=Sum('amount'))['total'] or ZERO

    def amount_due(self):
        return max(ZERO, self.total_amount - self.amount_settled())

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


class DocumentItem(models.Model):
    description = models.CharField(max_length=500)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    unit_price = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    total_price = models.DecimalField(max_digits=15, decimal_places=2, default=ZERO)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['id']

    def __str__(self):
        return self.description

    def save(self, *args, **kwargs):
        self.total_price = (self.quantity * self.unit_price).quantize(Decimal('0.01'))
        super().save(*args, **kwargs)


class Invoice(Document):
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='invoices')
    debtor = models.ForeignKey('contacts.Debtor', on_delete=models.RESTRICT, related_name='invoices')
    invoice_number = models.CharField(max_length=50, blank=True)

    contact_field = 'debtor'
    number_field = 'invoice_number'
    number_prefix = 'INV'
    settlements_name = 'receipts'

    class Meta(Document.Meta):
        db_table = 'invoices'
        constraints = [
            models.UniqueConstraint(fields=['business', 'invoice_number'], name='unique_invoice_number_per_business'),
        ]


class InvoiceItem(DocumentItem):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')

    class Meta(DocumentItem.Meta):
        db_table = 'invoice_items'


class Bill(Document):
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='bills')
    creditor = models.ForeignKey('contacts.Creditor', on_delete=models.RESTRICT, related_name='bills')
    bill_number = models.CharField(max_length=50, blank=True)

    contact_field = 'creditor'
    number_field = 'bill_number'
    number_prefix = 'BILL'
    settlements_name = 'payments'

    class Meta(Document.Meta):
        db_table = 'bills'
        constraints = [
            models.UniqueConstraint(fields=['business', 'bill_number'], name='unique_bill_number_per_business'),
        ]


class BillItem(DocumentItem):
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='items')

    class Meta(DocumentItem.Meta):
        db_table = 'bill_items'
