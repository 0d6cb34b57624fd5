from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models, transaction

from apps.businesses.numbering import lock_numbering, next_document_number

ZERO = Decimal('0.00')


class Purchase(models.Model):
    """A single-line purchase from a creditor, owed until paid"""
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='purchases')
    creditor = models.ForeignKey('contacts.Creditor', on_delete=models.RESTRICT, related_name='purchases')
    purchase_number = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True, default='')
    item_name = models.CharField(max_length=200)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    unit_price = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    total_price = models.DecimalField(max_digits=15, decimal_places=2, default=ZERO)
    purchase_date = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        ordering = ['-purchase_date', '-created_at']
        constraints = [
            models.UniqueConstraint(fields=['business', 'purchase_number'], name='unique_purchase_number_per_business'),
        ]

    def __str__(self):
        return f"{self.purchase_number} - {self.item_name}"

    def save(self, *args, **kwargs):
        self.total_price = (self.quantity * self.unit_price).quantize(Decimal('0.01'))
        if self.purchase_number:
            super().save(*args, **kwargs)
            return

        with transaction.atomic():
            lock_numbering(self.business_id)
            self.purchase_number = next_document_number(
                Purchase.objects.filter(business_id=self.business_id), 'purchase_number', 'PUR'
            )
            super().save(*args, **kwargs)
