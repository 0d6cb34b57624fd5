"""
Health Check Endpoint for AccuBooks
Provides system status for monitoring and load balancers
"""
import datetime
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DEFAULT_DB_ALIAS, connections
from django.db.migrations.executor import MigrationExecutor
from django.db.utils import DatabaseError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def _check_database():
    """Return 'ok' or an error string for the default database"""
    try:
        with connections[DEFAULT_DB_ALIAS].cursor() as cursor:
            cursor.execute("SELECT 1")
        return "ok"
    except DatabaseError as e:
        logger.error(f"Health check: database unavailable: {e}")
        return f"error: {e}"


def _check_cache():
    try:
        cache.set("health_check_test", "test", 30)
        if cache.get("health_check_test") == "test":
            return "ok"
        return "error: cache read/write failed"
    except Exception as e:  # Redis client errors vary by backend
        logger.warning(f"Health check: cache unavailable: {e}")
        return f"error: {e}"


def _check_migrations():
    connection = connections[DEFAULT_DB_ALIAS]
    executor = MigrationExecutor(connection)
    plan = executor.migration_plan(executor.loader.graph.leaf_nodes())
    return "ok" if not plan else f"pending: {len(plan)}"


@api_view(['GET'])
@permission_classes([AllowAny])  # Health check should be publicly accessible
@throttle_classes([])
def health_check(request):
    """
    Health check endpoint for monitoring and load balancers

    Returns 200 OK if the database is reachable (cache, migration and
    assistant problems only degrade the status)
    Returns 503 Service Unavailable if the database is down

    Usage:
        GET /api/health/

    Response:
        {
            "status": "healthy",
            "timestamp": "2025-03-03T12:00:00Z",
            "checks": {
                "database": "ok",
                "cache": "ok",
                "migrations": "ok",
                "assistant": "configured"
            }
        }
    """
    checks = {"database": _check_database()}
    if checks["database"] != "ok":
        return Response({
            "status": "unhealthy",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "checks": checks
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    checks["cache"] = _check_cache()
    checks["migrations"] = _check_migrations()
    checks["assistant"] = "configured" if settings.OPENAI_API_KEY else "not configured"

    degraded = checks["cache"] != "ok" or checks["migrations"] != "ok"
    return Response({
        "status": "degraded" if degraded else "healthy",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "checks": checks
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([])
def readiness(request):
    """
    Readiness probe for container deployments

    Returns 200 OK once the database answers, 503 otherwise
    """
    database = _check_database()
    if database == "ok":
        return Response({"status": "ready"}, status=status.HTTP_200_OK)
    return Response({
        "status": "not ready",
        "error": database
    }, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([])
def liveness(request):
    """Liveness probe: the process is up and serving requests"""
    return Response({"status": "alive"}, status=status.HTTP_200_OK)
