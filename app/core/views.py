"""
Core views and view helpers.

Contains infrastructure endpoints (health check) and the helper every API
view uses to turn a failed ServiceResult into an HTTP response.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import connection
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

from core.services import ErrorCode

if TYPE_CHECKING:
    from core.services import ServiceResult

logger = logging.getLogger(__name__)

# Unknown or missing codes fall back to 400
ERROR_CODE_STATUS = {
    ErrorCode.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OPERATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}


def service_error_response(result: ServiceResult) -> Response:
    """
    Build the error response for a failed ServiceResult.

    Body is {"error": <message>, "error_code": <code>}, plus "errors" when
    the result carries field-level details.
    """
    body = {"error": result.error, "error_code": result.error_code}
    if result.errors:
        body["errors"] = result.errors
    return Response(
        body,
        status=ERROR_CODE_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


def health_check(request):
    """
    Health check endpoint for load balancers and container probes.

    Returns:
        200 {"status": "healthy", "database": "connected", "cache": ...}
        503 when the database is unreachable. Cache failures only degrade.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        logger.exception("Health check database probe failed")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    try:
        from django.core.cache import cache

        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:
        logger.warning("Health check cache probe failed", exc_info=True)
        health_status["cache"] = "disconnected"

    return JsonResponse(health_status, status=200 if is_healthy else 503)
