from django.contrib import admin
from .models import AssistantSettings, Chat, ChatMessage, ApiRequest


@admin.register(AssistantSettings)
class AssistantSettingsAdmin(admin.ModelAdmin):
    list_display = ['business', 'model', 'temperature', 'max_tokens', 'has_api_key']
    exclude = ['openai_api_key']


class ChatMessageInline(admin.TabularInline):
    model = ChatMessage
    extra = 0
    readonly_fields = ['role', 'content', 'created_at']


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ['title', 'business', 'user', 'updated_at']
    list_filter = ['business']
    inlines = [ChatMessageInline]


@admin.register(ApiRequest)
class ApiRequestAdmin(admin.ModelAdmin):
    list_display = ['user', 'endpoint', 'created_at']
    list_filter = ['endpoint']
