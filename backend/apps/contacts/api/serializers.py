from rest_framework import serializers

from ..models import Creditor, Debtor

CONTACT_FIELDS = [
    'id', 'name', 'email', 'phone', 'address', 'outstanding_amount',
    'created_at', 'updated_at'
]


class CreditorSerializer(serializers.ModelSerializer):
    """Serializer for Creditor model"""

    class Meta:
        model = Creditor
        fields = CONTACT_FIELDS
        read_only_fields = ['id', 'outstanding_amount', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value


class DebtorSerializer(serializers.ModelSerializer):
    """Serializer for Debtor model"""

    class Meta:
        model = Debtor
        fields = CONTACT_FIELDS
        read_only_fields = ['id', 'outstanding_amount', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value
