from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import AssistantSettingsAPIView, ChatViewSet, AnalysisAPIView

router = DefaultRouter()
router.register(r'chats', ChatViewSet, basename='chat')

urlpatterns = [
    path('settings/', AssistantSettingsAPIView.as_view(), name='assistant-settings'),
    path('analysis/', AnalysisAPIView.as_view(), name='assistant-analysis'),
    path('', include(router.urls)),

    # Available endpoints:
    # /api/v1/assistant/settings/ - GET, PUT (model, temperature, max_tokens, openai_api_key)
    # /api/v1/assistant/analysis/ - POST ({type, time_range, entity_id?, custom_query?})
    # /api/v1/assistant/chats/ - GET (list), POST (create)
    # /api/v1/assistant/chats/{id}/ - GET (detail), PATCH (rename), DELETE (delete)
    # /api/v1/assistant/chats/{id}/messages/ - GET (history), POST (send a message)
]
