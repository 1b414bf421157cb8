"""
This file contains the API endpoints related to signing up and signing in.
"""

import logging

from django.db import IntegrityError, OperationalError, transaction
from ninja import Router
from ninja.errors import HttpRequest
from ninja.responses import codes_4xx, codes_5xx

from blogsite.schemas import Message
from users.auth import issue_token
from users.models import User
from users.schemas import SigninSchema, SignupSchema

router = Router(tags=["Users Auth"])

# Module-level logger
logger = logging.getLogger(__name__)


@router.post("/signup", response={200: str, codes_4xx: Message, codes_5xx: Message})
def signup(request: HttpRequest, payload: SignupSchema):
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=payload.username,
                password=payload.password,
                name=payload.name,
            )
    except IntegrityError:
        return 411, {"message": "Username is already taken."}
    except OperationalError as e:
        logger.error(f"Database unavailable during signup: {e}")
        return 503, {"message": "Database connection error. Please try again later."}

    logger.info(f"New user signed up: {user.id}")
    return 200, issue_token(user)


@router.post("/signin", response={200: str, codes_4xx: Message, codes_5xx: Message})
def signin(request: HttpRequest, payload: SigninSchema):
    try:
        user = User.objects.filter(username=payload.username).first()
        if user is None:
            return 403, {"message": "User not found"}

        if not user.verify_password(payload.password):
            return 403, {"message": "Incorrect password"}
    except OperationalError as e:
        logger.error(f"Database unavailable during signin: {e}")
        return 503, {"message": "Database connection error. Please try again later."}

    return 200, issue_token(user)
