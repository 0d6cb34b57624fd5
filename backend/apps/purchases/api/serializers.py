from rest_framework import serializers

from ..models import Purchase
from apps.businesses.scoping import BusinessScopedSerializerMixin


class PurchaseSerializer(BusinessScopedSerializerMixin, serializers.ModelSerializer):
    """Serializer for Purchase model"""

    creditor_name = serializers.CharField(source='creditor.name', read_only=True)

    class Meta:
        model = Purchase
        fields = [
            'id', 'purchase_number', 'creditor', 'creditor_name', 'description', 'item_name',
            'quantity', 'unit_price', 'total_price', 'purchase_date', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'purchase_number', 'total_price', 'created_at', 'updated_at']

    def validate_item_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Item name is required")
        return value.strip()

    def validate(self, data):
        errors = {}
        self.check_same_business(data.get('creditor'), 'creditor', errors)
        if errors:
            raise serializers.ValidationError(errors)
        return data
