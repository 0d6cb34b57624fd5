import logging
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction as db_transaction
from django.db.models import F

from apps.businesses.numbering import lock_numbering, next_document_number

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class BankAccount(models.Model):
    ACCOUNT_TYPE_CHOICES = [
        ('checking', 'Checking'),
        ('savings', 'Savings'),
        ('credit card', 'Credit Card'),
        ('cash', 'Cash'),
        ('other', 'Other'),
    ]

    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='bank_accounts')
    name = models.CharField(max_length=200)
    account_number = models.CharField(max_length=50, blank=True, default='')
    account_type = models.CharField(max_length=20, choices=ACCOUNT_TYPE_CHOICES, default='checking')
    opening_balance = models.DecimalField(max_digits=15, decimal_places=2, default=ZERO)
    current_balance = models.DecimalField(
        max_digits=15, decimal_places=2, default=ZERO,
        help_text='Opening balance plus the effect of every transaction on this account'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bank_accounts'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.account_number})" if self.account_number else self.name

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.current_balance = self.opening_balance
            super().save(*args, **kwargs)
            return

        # current_balance is owned by the transaction ledger; never write the in-memory copy back
        if kwargs.get('update_fields') is None:
            kwargs['update_fields'] = [
                f.name for f in self._meta.concrete_fields
                if not f.primary_key and f.name != 'current_balance'
            ]

        with db_transaction.atomic():
            previous_opening = (
                BankAccount.objects.select_for_update()
                .filter(pk=self.pk)
                .values_list('opening_balance', flat=True)
                .first()
            )
            super().save(*args, **kwargs)
            if previous_opening is not None and previous_opening != self.opening_balance:
                BankAccount.apply_balance_delta(self.pk, self.opening_balance - previous_opening)
        self.refresh_from_db(fields=['current_balance'])

    @staticmethod
    def apply_balance_delta(account_id, delta):
        """Shift an account's current balance by ``delta`` in a single UPDATE"""
        if account_id is None or not delta:
            return
        BankAccount.objects.filter(pk=account_id).update(current_balance=F('current_balance') + delta)

    def calculate_balance(self):
        """Opening balance plus the ledger, computed from the transactions themselves"""
        totals = self.transactions.aggregate(
            deposits=models.Sum('amount', filter=models.Q(transaction_type=BankTransaction.DEPOSIT)),
            outgoing=models.Sum('amount', filter=~models.Q(transaction_type=BankTransaction.DEPOSIT)),
        )
        return self.opening_balance + (totals['deposits'] or ZERO) - (totals['outgoing'] or ZERO)


class BankTransaction(models.Model):
    DEPOSIT = 'deposit'
    WITHDRAWAL = 'withdrawal'
    TRANSFER = 'transfer'

    TRANSACTION_TYPE_CHOICES = [
        (DEPOSIT, 'Deposit'),
        (WITHDRAWAL, 'Withdrawal'),
        (TRANSFER, 'Transfer'),
    ]

    NUMBER_PREFIXES = {
        DEPOSIT: 'DEP',
        WITHDRAWAL: 'WIT',
        TRANSFER: 'TRF',
    }

    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='bank_transactions')
    account = models.ForeignKey(BankAccount, on_delete=models.CASCADE, related_name='transactions')
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPE_CHOICES)
    destination_account = models.ForeignKey(
        BankAccount, on_delete=models.CASCADE, null=True, blank=True,
        related_name='incoming_transfers', help_text='Receiving account (transfers only)'
    )
    transfer_source = models.OneToOneField(
        'self', on_delete=models.CASCADE, null=True, blank=True,
        related_name='transfer_pair', help_text='Set on the deposit leg created for a transfer'
    )
    payment = models.OneToOneField(
        'payments.Payment', on_delete=models.CASCADE, null=True, blank=True,
        related_name='bank_transaction'
    )
    receipt = models.OneToOneField(
        'payments.Receipt', on_delete=models.CASCADE, null=True, blank=True,
        related_name='bank_transaction'
    )

    transaction_number = models.CharField(max_length=50, blank=True)
    amount = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    date = models.DateField()
    description = models.CharField(max_length=500)
    category = models.CharField(max_length=100, blank=True, default='')
    reconciled = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bank_transactions'
        ordering = ['-date', '-created_at']
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='bank_transaction_amount_positive'),
            models.UniqueConstraint(
                fields=['business', 'transaction_number'], name='unique_transaction_number_per_business'
            ),
        ]
        indexes = [
            models.Index(fields=['business', 'transaction_number'], name='bank_txn_business_number_idx'),
            models.Index(fields=['account', 'date'], name='bank_txn_account_date_idx'),
        ]

    def __str__(self):
        return f"{self.transaction_number} - {self.get_transaction_type_display()} {self.amount}"

    @property
    def is_transfer(self):
        return self.transaction_type == self.TRANSFER

    @property
    def is_transfer_leg(self):
        """True for the deposit created on the receiving side of a transfer"""
        return self.transfer_source_id is not None

    @staticmethod
    def signed_amount(transaction_type, amount):
        """Effect on the account balance: deposits add, withdrawals and transfers subtract"""
        return amount if transaction_type == BankTransaction.DEPOSIT else -amount

    @property
    def balance_effect(self):
        return self.signed_amount(self.transaction_type, self.amount)

    def save(self, *args, **kwargs):
        # The balance effect below needs a Decimal, not the raw input
        self.amount = self._meta.get_field('amount').to_python(self.amount)

        with db_transaction.atomic():
            if not self.transaction_number:
                lock_numbering(self.business_id)
                self.transaction_number = next_document_number(
                    BankTransaction.objects.filter(business_id=self.business_id),
                    'transaction_number',
                    self.NUMBER_PREFIXES[self.transaction_type],
                )

            previous = None
            if not self._state.adding:
                previous = (
                    BankTransaction.objects.filter(pk=self.pk)
                    .values('account_id', 'transaction_type', 'amount')
                    .first()
                )
            super().save(*args, **kwargs)

            # Reverse the old effect, then apply the new one
            if previous is not None:
                BankAccount.apply_balance_delta(
                    previous['account_id'],
                    -self.signed_amount(previous['transaction_type'], previous['amount'])
                )
            BankAccount.apply_balance_delta(self.account_id, self.balance_effect)


class BankReconciliation(models.Model):
    """A completed statement reconciliation for one account"""
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='reconciliations')
    account = models.ForeignKey(BankAccount, on_delete=models.CASCADE, related_name='reconciliations')
    statement_date = models.DateField()
    statement_balance = models.DecimalField(max_digits=15, decimal_places=2)
    reconciled_balance = models.DecimalField(max_digits=15, decimal_places=2)
    difference = models.DecimalField(max_digits=15, decimal_places=2)
    transactions_count = models.PositiveIntegerField(default=0)
    reconciled_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bank_reconciliations'
        ordering = ['-statement_date', '-created_at']

    def __str__(self):
        return f"{self.account.name} reconciled to {self.statement_date}"

    @property
    def is_balanced(self):
        return self.difference == ZERO
