import logging

from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.http import HttpRequest
from ninja import Router
from ninja.responses import codes_4xx, codes_5xx

from blogs.aggregation import like_count, serialize_blogs
from blogs.cache import invalidate_blog, load_blog_row, load_blog_rows
from blogs.models import Blog, Comment, Like, SavedPost
from blogs.schemas import (
    BlogCreateSchema,
    BlogDetail,
    BlogId,
    BlogList,
    BlogUpdateSchema,
    CommentCreated,
    CommentCreateSchema,
    CommentList,
    CommentOut,
    Deleted,
    LikeState,
    ReplyCreated,
    SaveState,
)
from blogsite.permissions import is_owner
from blogsite.schemas import Message
from users.auth import JWTAuth

router = Router(tags=["Blogs"])

# Module-level logger
logger = logging.getLogger(__name__)

"""
Blog related endpoints
"""


@router.post(
    "", response={200: BlogId, codes_4xx: Message, codes_5xx: Message}, auth=JWTAuth()
)
def create_blog(request: HttpRequest, payload: BlogCreateSchema):
    blog = Blog.objects.create(
        author=request.auth, title=payload.title, content=payload.content
    )
    invalidate_blog()
    logger.info(f"User {request.auth.id} created blog {blog.id}")
    return 200, {"id": blog.id}


@router.put(
    "", response={200: BlogId, codes_4xx: Message, codes_5xx: Message}, auth=JWTAuth()
)
def update_blog(request: HttpRequest, payload: BlogUpdateSchema):
    with transaction.atomic():
        blog = Blog.objects.select_for_update().filter(id=payload.id).first()
        if blog is None:
            return 404, {"message": "Blog not found"}
        if not is_owner(request.auth, blog):
            return 403, {"message": "Access denied - you can only edit your own posts"}

        blog.title = payload.title
        blog.content = payload.content
        blog.save(update_fields=["title", "content", "updated_at"])

    invalidate_blog(blog.id)
    return 200, {"id": blog.id}


# Must be registered before /{blog_id} so "bulk" is not parsed as an id
@router.get(
    "/bulk",
    response={200: BlogList, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
)
def list_blogs(request: HttpRequest):
    rows = load_blog_rows()
    return 200, {"blogs": serialize_blogs(rows, request.auth)}


@router.get(
    "/{blog_id}",
    response={200: BlogDetail, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
)
def get_blog(request: HttpRequest, blog_id: int):
    row = load_blog_row(blog_id)
    if row is None:
        return 404, {"message": "Blog not found"}
    return 200, {"blog": serialize_blogs([row], request.auth)[0]}


@router.delete(
    "/{blog_id}",
    response={200: Deleted, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def delete_blog(request: HttpRequest, blog_id: int):
    with transaction.atomic():
        blog = Blog.objects.select_for_update().filter(id=blog_id).first()
        if blog is None:
            return 404, {"message": "Blog not found"}
        if not is_owner(request.auth, blog):
            return 403, {
                "message": "Access denied - you can only delete your own posts"
            }
        # Likes, saved posts and comments go with it
        blog.delete()

    invalidate_blog(blog_id)
    logger.info(f"User {request.auth.id} deleted blog {blog_id}")
    return 200, {"deleted": True}


"""
Likes and saved posts
"""


@router.post(
    "/{blog_id}/like",
    response={200: LikeState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
)
def like_blog(request: HttpRequest, blog_id: int):
    if not Blog.objects.filter(id=blog_id).exists():
        return 404, {"message": "Blog not found"}

    try:
        # ON CONFLICT DO NOTHING: a second like from the same user is a no-op
        Like.objects.bulk_create(
            [Like(user=request.auth, blog_id=blog_id)], ignore_conflicts=True
        )
    except IntegrityError:
        # The blog was deleted between the existence check and the insert
        return 404, {"message": "Blog not found"}

    return 200, {"liked": True, "like_count": like_count(blog_id)}


@router.delete(
    "/{blog_id}/like",
    response={200: LikeState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
)
def unlike_blog(request: HttpRequest, blog_id: int):
    Like.objects.filter(user=request.auth, blog_id=blog_id).delete()
    return 200, {"liked": False, "like_count": like_count(blog_id)}


@router.get(
    "/{blog_id}/likes",
    response={200: LikeState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
)
def like_status(request: HttpRequest, blog_id: int):
    liked = Like.objects.filter(user=request.auth, blog_id=blog_id).exists()
    return 200, {"liked": liked, "like_count": like_count(blog_id)}


@router.post(
    "/{blog_id}/save",
    response={200: SaveState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def save_blog(request: HttpRequest, blog_id: int):
    if not Blog.objects.filter(id=blog_id).exists():
        return 404, {"message": "Blog not found"}

    try:
        SavedPost.objects.bulk_create(
            [SavedPost(user=request.auth, blog_id=blog_id)], ignore_conflicts=True
        )
    except IntegrityError:
        return 404, {"message": "Blog not found"}

    return 200, {"saved": True}


@router.delete(
    "/{blog_id}/save",
    response={200: SaveState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def unsave_blog(request: HttpRequest, blog_id: int):
    SavedPost.objects.filter(user=request.auth, blog_id=blog_id).delete()
    return 200, {"saved": False}


@router.get(
    "/{blog_id}/saved",
    response={200: SaveState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def save_status(request: HttpRequest, blog_id: int):
    saved = SavedPost.objects.filter(user=request.auth, blog_id=blog_id).exists()
    return 200, {"saved": saved}


"""
Comments related endpoints
"""


@router.get(
    "/{blog_id}/comments",
    response={200: CommentList, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
    exclude_unset=True,
)
def list_comments(request: HttpRequest, blog_id: int):
    if not Blog.objects.filter(id=blog_id).exists():
        return 404, {"message": "Blog not found"}

    comments = (
        Comment.objects.filter(blog_id=blog_id, parent__isnull=True)
        .select_related("author")
        .prefetch_related(
            Prefetch(
                "replies",
                queryset=Comment.objects.select_related("author").order_by(
                    "created_at", "id"
                ),
            )
        )
        .order_by("-created_at", "-id")
    )
    return 200, {
        "comments": [
            CommentOut.from_model(comment, replies=comment.replies.all())
            for comment in comments
        ]
    }


@router.post(
    "/{blog_id}/comments",
    response={200: CommentCreated, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
    exclude_unset=True,
)
def create_comment(request: HttpRequest, blog_id: int, payload: CommentCreateSchema):
    content = payload.content.strip()
    if not content:
        return 400, {"message": "Comment content is required"}

    if not Blog.objects.filter(id=blog_id).exists():
        return 404, {"message": "Blog not found"}

    comment = Comment.objects.create(
        blog_id=blog_id, author=request.auth, content=content
    )
    return 200, {"comment": CommentOut.from_model(comment, replies=[])}


@router.post(
    "/comment/{comment_id}/reply",
    response={200: ReplyCreated, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
    by_alias=True,
    exclude_unset=True,
)
def reply_to_comment(
    request: HttpRequest, comment_id: int, payload: CommentCreateSchema
):
    content = payload.content.strip()
    if not content:
        return 400, {"message": "Reply content is required"}

    parent = Comment.objects.filter(id=comment_id).first()
    if parent is None:
        return 404, {"message": "Parent comment not found"}
    if parent.is_reply:
        return 400, {"message": "You can only reply to top-level comments"}

    reply = Comment.objects.create(
        blog_id=parent.blog_id, parent=parent, author=request.auth, content=content
    )
    return 200, {"reply": CommentOut.from_model(reply)}
