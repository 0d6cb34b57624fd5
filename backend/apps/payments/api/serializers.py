from rest_framework import serializers

from ..models import Payment, Receipt
from apps.bank_accounts.models import BankTransaction
from apps.businesses.scoping import BusinessScopedSerializerMixin

SETTLEMENT_FIELDS = [
    'id', 'bank_account', 'bank_account_name', 'amount', 'payment_date',
    'payment_method', 'reference', 'notes', 'bank_transaction',
    'create_bank_transaction', 'created_at', 'updated_at'
]


class SettlementSerializerMixin(BusinessScopedSerializerMixin):
    """Validation shared by payments and receipts"""

    def get_bank_transaction(self, obj):
        """The linked bank transaction, if any"""
        return BankTransaction.objects.filter(
            **{obj._meta.model_name: obj}
        ).values('id', 'transaction_number', 'reconciled').first()

    def validate(self, data):
        model = self.Meta.model
        contact_field = model.contact_field
        document_field = model.document_field
        errors = {}

        contact = self.field_value(data, contact_field)
        document = self.field_value(data, document_field)
        bank_account = self.field_value(data, 'bank_account')

        self.check_same_business(data.get(contact_field), contact_field, errors)
        self.check_same_business(data.get(document_field), document_field, errors)
        self.check_same_business(data.get('bank_account'), 'bank_account', errors)

        if document is not None:
            if contact is None:
                # Settling a document implies its contact
                contact = document.contact
                data[contact_field] = contact
            elif document.contact_id != contact.pk:
                errors[document_field] = f'This {document_field} belongs to a different {contact_field}.'

            document_changed = self.instance is None or getattr(self.instance, f'{document_field}_id') != document.pk
            if document_changed and not document.is_open:
                errors[document_field] = f'Only open {document_field}s can be settled.'

        wants_bank = self.field_value(data, 'payment_method') == model.BANK_TRANSFER
        if self.instance is None and data.get('create_bank_transaction', True):
            wants_bank = True
        if wants_bank and bank_account is None:
            errors['bank_account'] = 'Select the bank account for a bank transfer.'

        if errors:
            raise serializers.ValidationError(errors)
        return data


class PaymentSerializer(SettlementSerializerMixin, serializers.ModelSerializer):
    """Serializer for Payment model"""

    creditor_name = serializers.CharField(source='creditor.name', read_only=True, allow_null=True)
    bill_number = serializers.CharField(source='bill.bill_number', read_only=True, allow_null=True)
    bank_account_name = serializers.CharField(source='bank_account.name', read_only=True, allow_null=True)
    bank_transaction = serializers.SerializerMethodField()
    create_bank_transaction = serializers.BooleanField(write_only=True, required=False, default=True)

    class Meta:
        model = Payment
        fields = ['payment_number', 'creditor', 'creditor_name', 'bill', 'bill_number'] + SETTLEMENT_FIELDS
        read_only_fields = ['id', 'payment_number', 'created_at', 'updated_at']


class ReceiptSerializer(SettlementSerializerMixin, serializers.ModelSerializer):
    """Serializer for Receipt model"""

    debtor_name = serializers.CharField(source='debtor.name', read_only=True, allow_null=True)
    invoice_number = serializers.CharField(source='invoice.invoice_number', read_only=True, allow_null=True)
    bank_account_name = serializers.CharField(source='bank_account.name', read_only=True, allow_null=True)
    bank_transaction = serializers.SerializerMethodField()
    create_bank_transaction = serializers.BooleanField(write_only=True, required=False, default=True)

    class Meta:
        model = Receipt
        fields = ['receipt_number', 'debtor', 'debtor_name', 'invoice', 'invoice_number'] + SETTLEMENT_FIELDS
        read_only_fields = ['id', 'receipt_number', 'created_at', 'updated_at']
