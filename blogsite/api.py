import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import OperationalError
from django_ratelimit.exceptions import Ratelimited
from ninja import NinjaAPI, Router
from ninja.errors import AuthenticationError, HttpError, HttpRequest, ValidationError

from assistant.api import router as assistant_router
from assistant.services import AIServiceUnavailable
from blogs.api import router as blogs_router
from users.api import router as users_general_router
from users.api_auth import router as users_router

api = NinjaAPI(docs_url="docs/", title="Blog API", urls_namespace="api_v1")

logger = logging.getLogger(__name__)

"""
Global Exception Handlers (Error Handlers)
"""


@api.exception_handler(AuthenticationError)
def custom_authentication_error_handler(request, exc):
    return api.create_response(
        request,
        {"message": "You need to be authenticated to perform this action."},
        status=401,
    )


@api.exception_handler(HttpError)
def custom_http_error_handler(request, exc):
    return api.create_response(
        request, {"message": exc.message}, status=exc.status_code
    )


@api.exception_handler(ValidationError)
def validation_error_handler(request: HttpRequest, exc: ValidationError):
    return api.create_response(
        request, {"message": "Invalid input", "errors": exc.errors}, status=411
    )


@api.exception_handler(ObjectDoesNotExist)
def object_not_found_handler(request, exc):
    # Return a 404 response if the object is not found
    return api.create_response(request, {"message": str(exc)}, status=404)


@api.exception_handler(OperationalError)
def database_unavailable_handler(request, exc):
    logger.error(f"Database unavailable: {exc}")
    return api.create_response(
        request,
        {"message": "Database connection error. Please try again later."},
        status=503,
    )


@api.exception_handler(Ratelimited)
def ratelimited_handler(request, exc):
    return api.create_response(
        request,
        {"message": "Too many requests. Please slow down and try again later."},
        status=429,
    )


@api.exception_handler(AIServiceUnavailable)
def ai_unavailable_handler(request, exc):
    return api.create_response(request, {"message": str(exc)}, status=503)


@api.exception_handler(Exception)
def generic_error_handler(request: HttpRequest, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.path}: {exc}")
    if settings.DEBUG:
        error_message = str(exc)
    else:
        error_message = "Internal Server Error"

    return api.create_response(request, {"message": error_message}, status=500)


"""
Registering the routers
"""


# Create a parent router to aggregate all user-related endpoints
users_parent_router = Router()

users_parent_router.add_router("", users_router)
users_parent_router.add_router("", users_general_router)

api.add_router("/user", users_parent_router)
api.add_router("/blog", blogs_router)
api.add_router("/ai", assistant_router)
