import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from ..models import AssistantSettings, Chat, ChatMessage, ApiRequest
from .. import analysis
from ..client import AssistantError, complete
from ..context import system_prompt
from ..throttles import AnalysisRateThrottle
from .serializers import (
    AssistantSettingsSerializer, ChatSerializer, ChatMessageSerializer, MessageCreateSerializer
)
from apps.api.pagination import StandardResultsSetPagination
from apps.api.permissions import IsBusinessOwner
from apps.businesses.scoping import BusinessScopedViewSetMixin, resolve_business

logger = logging.getLogger(__name__)


class AssistantSettingsAPIView(APIView):
    """Read and update the active business's assistant settings"""

    def get(self, request):
        instance = AssistantSettings.for_business(resolve_business(request))
        return Response(AssistantSettingsSerializer(instance).data)

    def put(self, request):
        instance = AssistantSettings.for_business(resolve_business(request))
        serializer = AssistantSettingsSerializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Assistant settings updated for business {instance.business_id}")
        return Response(serializer.data)


class ChatViewSet(BusinessScopedViewSetMixin, viewsets.ModelViewSet):
    """
    Chats of the requesting user within the active business.

    POST messages/ stores the user's message, asks the model with the business
    snapshot as context and stores the reply.
    """
    queryset = Chat.objects.all()
    serializer_class = ChatSerializer
    permission_classes = [IsBusinessOwner]
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        return super().get_queryset().filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(business=self.get_business(), user=self.request.user)

    @action(detail=True, methods=['get', 'post'])
    def messages(self, request, pk=None):
        chat = self.get_object()

        if request.method == 'GET':
            return Response(ChatMessageSerializer(chat.messages.all(), many=True).data)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        content = serializer.validated_data['content']

        assistant_settings = AssistantSettings.for_business(chat.business)
        api_key = assistant_settings.resolve_api_key()
        if not api_key:
            return Response(
                {'error': 'No OpenAI API key is configured for this business'},
                status=status.HTTP_400_BAD_REQUEST
            )

        history = [{'role': m.role, 'content': m.content} for m in chat.messages.all()]
        user_message = ChatMessage.objects.create(chat=chat, role=ChatMessage.USER, content=content)

        try:
            reply = complete(
                [{'role': 'system', 'content': system_prompt(chat.business)}]
                + history
                + [{'role': 'user', 'content': content}],
                api_key=api_key,
                model=assistant_settings.model,
                temperature=assistant_settings.temperature,
                max_tokens=assistant_settings.max_tokens,
            )
        except AssistantError:
            logger.exception(f"Assistant reply failed for chat {chat.id}")
            return Response(
                {
                    'error': 'Failed to get a response from the assistant',
                    'user_message': ChatMessageSerializer(user_message).data,
                },
                status=status.HTTP_502_BAD_GATEWAY
            )

        assistant_message = ChatMessage.objects.create(chat=chat, role=ChatMessage.ASSISTANT, content=reply)
        chat.save(update_fields=['updated_at'])

        return Response({
            'user_message': ChatMessageSerializer(user_message).data,
            'assistant_message': ChatMessageSerializer(assistant_message).data,
        }, status=status.HTTP_201_CREATED)


class AnalysisAPIView(APIView):
    """
    Financial analysis of a bank account, creditor, debtor or the whole business.

    Body: {type, time_range, entity_id?, custom_query?}
    """
    throttle_classes = [UserRateThrottle, AnalysisRateThrottle]

    def post(self, request):
        business = resolve_business(request)
        analysis_type = request.data.get('type')
        time_range = request.data.get('time_range')
        entity_id = request.data.get('entity_id')
        custom_query = request.data.get('custom_query') or None

        if not analysis_type or not time_range:
            return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)
        if analysis_type not in analysis.ANALYSIS_TYPES:
            return Response(
                {'error': f"type must be one of: {', '.join(analysis.ANALYSIS_TYPES)}"},
                status=status.HTTP_400_BAD_REQUEST
            )
        if time_range not in analysis.TIME_RANGE_DAYS:
            return Response(
                {'error': f"time_range must be one of: {', '.join(analysis.TIME_RANGE_DAYS)}"},
                status=status.HTTP_400_BAD_REQUEST
            )

        entity = None
        entity_model = analysis.ENTITY_MODELS.get(analysis_type)
        if entity_model is not None:
            if not entity_id:
                return Response(
                    {'error': f'entity_id is required for {analysis_type} analysis'},
                    status=status.HTTP_400_BAD_REQUEST
                )
            try:
                entity = entity_model.objects.get(pk=int(entity_id), business=business)
            except (entity_model.DoesNotExist, ValueError, TypeError):
                return Response({'error': f'{analysis_type.capitalize()} not found'}, status=status.HTTP_404_NOT_FOUND)

        ApiRequest.objects.create(user=request.user, endpoint=ApiRequest.ANALYSIS)

        try:
            result = analysis.run_analysis(business, analysis_type, time_range, entity, custom_query)
        except AssistantError:
            logger.exception(f"Analysis failed: business={business.id} type={analysis_type} range={time_range}")
            return Response(
                {'success': False, 'error': 'Internal server error'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({'success': True, 'data': result})
