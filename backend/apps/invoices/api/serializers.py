from rest_framework import serializers

from ..models import Invoice, InvoiceItem, Bill, BillItem
from apps.api.formatting import money
from apps.businesses.scoping import BusinessScopedSerializerMixin

DOCUMENT_FIELDS = [
    'id', 'issue_date', 'due_date', 'status', 'status_display', 'is_overdue',
    'total_amount', 'amount_due', 'notes', 'items', 'created_at', 'updated_at'
]


class InvoiceItemSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(required=False)

    class Meta:
        model = InvoiceItem
        fields = ['id', 'description', 'quantity', 'unit_price', 'total_price']
        read_only_fields = ['total_price']


class BillItemSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(required=False)

    class Meta:
        model = BillItem
        fields = ['id', 'description', 'quantity', 'unit_price', 'total_price']
        read_only_fields = ['total_price']


class DocumentSerializerMixin(BusinessScopedSerializerMixin):
    """Validation shared by invoices and bills"""

    def get_amount_due(self, obj):
        return money(obj.amount_due())

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one line item is required")
        for item in value:
            if not (item.get('description') or '').strip():
                raise serializers.ValidationError("Every line item needs a description")
        return value

    def _items_changed(self, items):
        """Whether incoming line items differ from the stored ones"""
        stored = {
            item.pk: (item.description, item.quantity, item.unit_price)
            for item in self.instance.items.all()
        }
        incoming = {}
        for item in items:
            if item.get('id') not in stored:
                return True
            incoming[item['id']] = (item['description'], item['quantity'], item['unit_price'])
        return incoming != stored

    def validate(self, data):
        errors = {}
        issue_date = self.field_value(data, 'issue_date')
        due_date = self.field_value(data, 'due_date')

        if issue_date and due_date and due_date < issue_date:
            errors['due_date'] = 'Due date cannot be before the issue date.'

        contact_field = self.Meta.model.contact_field
        self.check_same_business(data.get(contact_field), contact_field, errors)

        if self.instance is not None and not self.instance.is_open:
            contact_changed = contact_field in data and data[contact_field] != getattr(self.instance, contact_field)
            if 'items' in data and not self._items_changed(data['items']):
                # Unchanged items are not rewritten on a closed document
                data.pop('items')
            if contact_changed or 'items' in data:
                errors['non_field_errors'] = [
                    f'{self.instance.get_status_display()} documents cannot change their items or contact.'
                ]

        if errors:
            raise serializers.ValidationError(errors)
        return data


class InvoiceSerializer(DocumentSerializerMixin, serializers.ModelSerializer):
    """Invoice with nested line items"""

    items = InvoiceItemSerializer(many=True)
    debtor_name = serializers.CharField(source='debtor.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    amount_due = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = ['invoice_number', 'debtor', 'debtor_name'] + DOCUMENT_FIELDS
        read_only_fields = ['id', 'invoice_number', 'status', 'total_amount', 'created_at', 'updated_at']


class InvoiceListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for invoice list views"""

    debtor_name = serializers.CharField(source='debtor.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'debtor', 'debtor_name', 'issue_date', 'due_date',
            'status', 'status_display', 'is_overdue', 'total_amount', 'created_at'
        ]


class BillSerializer(DocumentSerializerMixin, serializers.ModelSerializer):
    """Bill with nested line items"""

    items = BillItemSerializer(many=True)
    creditor_name = serializers.CharField(source='creditor.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    amount_due = serializers.SerializerMethodField()

    class Meta:
        model = Bill
        fields = ['bill_number', 'creditor', 'creditor_name'] + DOCUMENT_FIELDS
        read_only_fields = ['id', 'bill_number', 'status', 'total_amount', 'created_at', 'updated_at']


class BillListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for bill list views"""

    creditor_name = serializers.CharField(source='creditor.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id', 'bill_number', 'creditor', 'creditor_name', 'issue_date', 'due_date',
            'status', 'status_display', 'is_overdue', 'total_amount', 'created_at'
        ]
