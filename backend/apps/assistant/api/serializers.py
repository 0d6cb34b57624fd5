from rest_framework import serializers

from ..models import AssistantSettings, Chat, ChatMessage


class AssistantSettingsSerializer(serializers.ModelSerializer):
    """The API key is accepted but never returned; clients see has_api_key instead"""

    openai_api_key = serializers.CharField(write_only=True, required=False, allow_blank=True)
    has_api_key = serializers.BooleanField(read_only=True)

    class Meta:
        model = AssistantSettings
        fields = ['openai_api_key', 'has_api_key', 'model', 'temperature', 'max_tokens', 'updated_at']
        read_only_fields = ['updated_at']

    def validate_openai_api_key(self, value):
        return value.strip()


class ChatMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ChatMessage
        fields = ['id', 'role', 'content', 'created_at']
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField()

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Message cannot be empty")
        return value


class ChatSerializer(serializers.ModelSerializer):
    message_count = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = ['id', 'title', 'message_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_message_count(self, obj):
        return obj.messages.count()
