import logging
from typing import Optional

from django.http import HttpRequest
from ninja.errors import HttpError
from ninja.security import HttpBearer
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import AccessToken

from users.models import User

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    """Signed access token whose payload identifies the user by id."""
    return str(AccessToken.for_user(user))


def resolve_token_user(token: str) -> Optional[User]:
    """
    Verify ``token`` and return the user it belongs to, or None when the
    signature is wrong, the token expired or the user no longer exists.
    """
    jwt_authentication = JWTAuthentication()
    try:
        validated_token = jwt_authentication.get_validated_token(token)
        return jwt_authentication.get_user(validated_token)
    except (InvalidToken, TokenError, AuthenticationFailed) as e:
        logger.debug(f"Rejected bearer token: {e}")
        return None


class JWTAuth(HttpBearer):
    """Required authentication: the handler never runs without a valid token."""

    def authenticate(self, request: HttpRequest, token):
        user = resolve_token_user(token)
        if user is None:
            raise HttpError(401, "Your session has expired. Please log in again.")
        return user


# Function-based auth for public endpoints that personalise their response
def OptionalJWTAuth(request: HttpRequest):
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return True  # No token provided, proceed anonymously
    if not auth_header.startswith("Bearer "):
        return True  # Token not in correct format, proceed anonymously

    token = auth_header.split("Bearer ", 1)[1]

    # Invalid or expired tokens never fail a public request.
    return resolve_token_user(token) or True


def get_viewer(request: HttpRequest) -> Optional[User]:
    """The authenticated user behind ``request``, or None for anonymous viewers."""
    auth = getattr(request, "auth", None)
    return auth if isinstance(auth, User) else None
