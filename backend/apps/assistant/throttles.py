"""
Analysis rate limiting.

Accepted analysis requests are stored as ApiRequest rows, so the limit holds
across processes and restarts: at most ASSISTANT_RATE_LIMIT requests per user
in any rolling hour.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework.throttling import BaseThrottle

from .models import ApiRequest

logger = logging.getLogger(__name__)

WINDOW = timedelta(hours=1)


class AnalysisRateThrottle(BaseThrottle):
    """
    Limit: ASSISTANT_RATE_LIMIT analysis requests per user per rolling hour
    Applies to: POST /api/v1/assistant/analysis/
    """

    def allow_request(self, request, view):
        if not request.user.is_authenticated:
            return True

        self.window_start = timezone.now() - WINDOW
        self.recent = ApiRequest.objects.filter(
            user=request.user, endpoint=ApiRequest.ANALYSIS, created_at__gte=self.window_start
        )
        allowed = self.recent.count() < settings.ASSISTANT_RATE_LIMIT

        if not allowed:
            logger.warning(
                f"SECURITY: Rate limit exceeded for assistant analysis. "
                f"User: {request.user.username}, "
                f"IP: {self.get_ident(request)}, "
                f"Path: {request.path}"
            )

        return allowed

    def wait(self):
        oldest = self.recent.order_by('created_at').first()
        if oldest is None:
            return None
        return max(0, (oldest.created_at - self.window_start).total_seconds())
