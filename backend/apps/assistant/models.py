from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class AssistantSettings(models.Model):
    """Per-business OpenAI configuration for the chat assistant"""
    business = models.OneToOneField(
        'businesses.Business', on_delete=models.CASCADE, related_name='assistant_settings'
    )
    openai_api_key = models.CharField(max_length=255, blank=True, default='')
    model = models.CharField(max_length=100, default='gpt-4')
    temperature = models.FloatField(
        default=0.7, validators=[MinValueValidator(0.0), MaxValueValidator(2.0)]
    )
    max_tokens = models.PositiveIntegerField(
        default=2000, validators=[MinValueValidator(1), MaxValueValidator(32000)]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'assistant_settings'
        verbose_name_plural = 'Assistant settings'

    def __str__(self):
        return f"Assistant settings for {self.business}"

    @classmethod
    def for_business(cls, business):
        instance, _ = cls.objects.get_or_create(
            business=business, defaults={'model': settings.ASSISTANT_DEFAULT_MODEL}
        )
        return instance

    @property
    def has_api_key(self):
        return bool(self.openai_api_key)

    def resolve_api_key(self):
        """The business's own key, else the server key"""
        return self.openai_api_key or settings.OPENAI_API_KEY


class Chat(models.Model):
    business = models.ForeignKey('businesses.Business', on_delete=models.CASCADE, related_name='chats')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='chats')
    title = models.CharField(max_length=200, default='New Chat')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'assistant_chats'
        ordering = ['-updated_at']

    def __str__(self):
        return self.title


class ChatMessage(models.Model):
    USER = 'user'
    ASSISTANT = 'assistant'

    ROLE_CHOICES = [
        (USER, 'User'),
        (ASSISTANT, 'Assistant'),
    ]

    chat = models.ForeignKey(Chat, on_delete=models.CASCADE, related_name='messages')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'assistant_messages'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.role}: {self.content[:50]}"


class ApiRequest(models.Model):
    """One accepted analysis request; rows in the last hour drive the rate limit"""
    ANALYSIS = 'openai-analysis'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='api_requests')
    endpoint = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'api_requests'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='api_requests_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.endpoint} {self.created_at}"
