from rest_framework import serializers

from ..models import Business


class BusinessSerializer(serializers.ModelSerializer):
    """Serializer for Business model"""

    class Meta:
        model = Business
        fields = [
            'id', 'name', 'address', 'phone', 'email', 'tax_id', 'logo_url',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        """Business names are unique per owner"""
        request = self.context['request']
        existing = Business.objects.filter(owner=request.user, name__iexact=value.strip())
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("You already have a business with this name")
        return value.strip()
