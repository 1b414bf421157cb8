"""
AI writing assistance endpoints. All of them need a signed in user and are
rate limited per signed in user because every call costs API quota.
"""

from django.conf import settings
from django.http import HttpRequest
from django_ratelimit.decorators import ratelimit
from ninja import Router
from ninja.responses import codes_4xx, codes_5xx

from assistant import services
from assistant.schemas import (
    CompletionIn,
    CompletionOut,
    GrammarIn,
    GrammarOut,
    OutlineIn,
    OutlineOut,
    RewriteIn,
    RewriteOut,
    StatusOut,
    SummaryIn,
    SummaryOut,
    TextIn,
    TextOut,
    TitlesIn,
    TitlesOut,
)
from blogsite.schemas import Message
from users.auth import JWTAuth

router = Router(tags=["AI Assistant"], auth=JWTAuth())


def ai_rate(group, request):
    return settings.AI_RATE_LIMIT


def ai_rate_key(group, request):
    # Bearer auth sets request.auth, not request.user
    user = getattr(request, "auth", None)
    if user is not None and getattr(user, "pk", None) is not None:
        return f"user:{user.pk}"
    return f"ip:{request.META.get('REMOTE_ADDR', '')}"


@router.post("/summary", response={200: SummaryOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def summarize(request: HttpRequest, payload: SummaryIn):
    return 200, services.summarize_blog(payload.title, payload.content)


@router.post("/grammar", response={200: GrammarOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def grammar(request: HttpRequest, payload: GrammarIn):
    return 200, services.check_grammar(payload.text, payload.language)


@router.post("/autocorrect", response={200: TextOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def autocorrect(request: HttpRequest, payload: TextIn):
    return 200, {"text": services.auto_correct(payload.text)}


@router.post("/complete", response={200: CompletionOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def complete(request: HttpRequest, payload: CompletionIn):
    return 200, services.complete_text(payload.text, payload.type)


@router.post("/titles", response={200: TitlesOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def titles(request: HttpRequest, payload: TitlesIn):
    return 200, {"titles": services.suggest_titles(payload.content)}


@router.post("/outline", response={200: OutlineOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def outline(request: HttpRequest, payload: OutlineIn):
    return 200, {"sections": services.suggest_outline(payload.topic)}


@router.post("/suggestions", response={200: RewriteOut, codes_4xx: Message, codes_5xx: Message})
@ratelimit(key=ai_rate_key, rate=ai_rate, method=ratelimit.ALL, block=True)
def suggestions(request: HttpRequest, payload: RewriteIn):
    return 200, {
        "suggestions": services.suggest_rewrites(payload.text, payload.selected)
    }


@router.get("/status", response={200: StatusOut, codes_4xx: Message, codes_5xx: Message})
def status(request: HttpRequest):
    return 200, {"connected": services.connection_ok()}
