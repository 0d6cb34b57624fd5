from rest_framework import serializers

from ..models import BankAccount, BankTransaction, BankReconciliation
from apps.businesses.scoping import BusinessScopedSerializerMixin


class BankAccountSerializer(serializers.ModelSerializer):
    """Complete serializer for BankAccount model"""

    account_type_display = serializers.CharField(source='get_account_type_display', read_only=True)
    transactions_count = serializers.SerializerMethodField()
    unreconciled_count = serializers.SerializerMethodField()
    last_transaction_date = serializers.SerializerMethodField()

    class Meta:
        model = BankAccount
        fields = [
            'id', 'name', 'account_number', 'account_type', 'account_type_display',
            'opening_balance', 'current_balance',
            'transactions_count', 'unreconciled_count', 'last_transaction_date',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'current_balance', 'created_at', 'updated_at']

    def get_transactions_count(self, obj):
        """Count of transactions for this bank account"""
        return obj.transactions.count()

    def get_unreconciled_count(self, obj):
        return obj.transactions.filter(reconciled=False).count()

    def get_last_transaction_date(self, obj):
        """Date of most recent transaction"""
        last_transaction = obj.transactions.order_by('-date').first()
        return last_transaction.date if last_transaction else None

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Account name is required")
        return value


class BankAccountListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for bank account list views"""

    account_type_display = serializers.CharField(source='get_account_type_display', read_only=True)

    class Meta:
        model = BankAccount
        fields = [
            'id', 'name', 'account_number', 'account_type', 'account_type_display',
            'opening_balance', 'current_balance', 'created_at'
        ]


class BankTransactionSerializer(BusinessScopedSerializerMixin, serializers.ModelSerializer):
    """Serializer for BankTransaction model"""

    account_name = serializers.CharField(source='account.name', read_only=True)
    destination_account_name = serializers.CharField(source='destination_account.name', read_only=True, allow_null=True)
    transaction_type_display = serializers.CharField(source='get_transaction_type_display', read_only=True)
    transfer_pair = serializers.SerializerMethodField()
    payment_number = serializers.CharField(source='payment.payment_number', read_only=True, allow_null=True)
    receipt_number = serializers.CharField(source='receipt.receipt_number', read_only=True, allow_null=True)

    class Meta:
        model = BankTransaction
        fields = [
            'id', 'transaction_number', 'account', 'account_name',
            'transaction_type', 'transaction_type_display',
            'destination_account', 'destination_account_name',
            'transfer_source', 'transfer_pair', 'payment', 'payment_number', 'receipt', 'receipt_number',
            'amount', 'date', 'description', 'category', 'reconciled', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'transaction_number', 'transfer_source', 'payment', 'receipt',
            'created_at', 'updated_at'
        ]
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
        }

    def get_transfer_pair(self, obj):
        """Id of the paired deposit for a transfer"""
        pair = BankTransaction.objects.filter(transfer_source=obj).values_list('id', flat=True).first()
        return pair

    def validate(self, data):
        """Validate that all required fields are provided and consistent"""
        errors = {}

        account = self.field_value(data, 'account')
        transaction_type = self.field_value(data, 'transaction_type')
        destination = self.field_value(data, 'destination_account')
        amount = self.field_value(data, 'amount')
        description = self.field_value(data, 'description')

        if not account:
            errors['account'] = 'Please select an account.'
        if not transaction_type:
            errors['transaction_type'] = 'Please select a transaction type.'
        if not self.field_value(data, 'date'):
            errors['date'] = 'Please enter a date.'
        if amount is None or amount <= 0:
            errors['amount'] = 'Amount must be greater than zero.'
        if not description or not description.strip():
            errors['description'] = 'Please enter a description.'

        if transaction_type == BankTransaction.TRANSFER:
            if not destination:
                errors['destination_account'] = 'Please select a destination account for the transfer.'
            elif account and destination.pk == account.pk:
                errors['destination_account'] = 'Source and destination accounts must be different.'

        self.check_same_business(account, 'account', errors)
        self.check_same_business(destination, 'destination_account', errors)

        # The receiving side of a transfer follows its source
        if self.instance is not None and self.instance.is_transfer_leg:
            locked = [
                field for field in ('account', 'amount', 'transaction_type', 'destination_account')
                if field in data and data[field] != getattr(self.instance, field)
            ]
            if locked:
                errors['non_field_errors'] = [
                    f'This deposit is the receiving side of transfer '
                    f'{self.instance.transfer_source.transaction_number}. '
                    f'Edit the transfer to change: {", ".join(locked)}'
                ]

        if errors:
            raise serializers.ValidationError(errors)

        if 'description' in data:
            data['description'] = data['description'].strip()
        return data


class BankTransactionListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for transaction list views"""

    account_name = serializers.CharField(source='account.name', read_only=True)
    transaction_type_display = serializers.CharField(source='get_transaction_type_display', read_only=True)

    class Meta:
        model = BankTransaction
        fields = [
            'id', 'transaction_number', 'account', 'account_name',
            'transaction_type', 'transaction_type_display', 'destination_account',
            'transfer_source', 'amount', 'date', 'description', 'category', 'reconciled'
        ]


class BankReconciliationSerializer(serializers.ModelSerializer):
    """Read-only serializer for completed reconciliations"""

    account_name = serializers.CharField(source='account.name', read_only=True)
    reconciled_by_username = serializers.CharField(source='reconciled_by.username', read_only=True, allow_null=True)
    is_balanced = serializers.BooleanField(read_only=True)

    class Meta:
        model = BankReconciliation
        fields = [
            'id', 'account', 'account_name', 'statement_date', 'statement_balance',
            'reconciled_balance', 'difference', 'is_balanced', 'transactions_count',
            'reconciled_by', 'reconciled_by_username', 'created_at'
        ]
        read_only_fields = fields


class ReconcileRequestSerializer(serializers.Serializer):
    """Payload for POST /accounts/{id}/reconcile/"""
    statement_balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    statement_date = serializers.DateField()
    transaction_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)
