"""
URL configuration for blogsite project.
"""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path
from django.utils import timezone

from blogsite.api import api

logger = logging.getLogger(__name__)


def index(request):
    return JsonResponse({"message": "Backend server is running!"})


def health(request):
    timestamp = timezone.now().isoformat()
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"Health check failed: {e}")
        return JsonResponse(
            {
                "status": "Error",
                "database": "Disconnected",
                "error": "Database connection failed",
                "timestamp": timestamp,
            },
            status=503,
        )

    return JsonResponse(
        {"status": "OK", "database": "Connected", "timestamp": timestamp}
    )


urlpatterns = [
    path("", index, name="index"),
    path("health", health, name="health"),
    path("api/v1/", api.urls),
]
