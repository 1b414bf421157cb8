"""
Follow graph and profile endpoints.
"""

import logging

from django.db import IntegrityError, transaction
from django.http import HttpRequest
from ninja import Router
from ninja.responses import codes_4xx, codes_5xx

from blogs.aggregation import blog_row, is_following, profile_stats, serialize_blogs
from blogs.models import Blog, Comment, Like, SavedPost
from blogsite.permissions import is_owner
from blogsite.schemas import Message, UserBrief
from users.auth import JWTAuth, OptionalJWTAuth, get_viewer
from users.models import Follow, User
from users.schemas import (
    FollowState,
    ProfileBlogs,
    ProfileComments,
    ProfileLikes,
    ProfileOut,
    ProfileSaved,
    Success,
    UserList,
)

router = Router(tags=["Users"])

# Module-level logger
logger = logging.getLogger(__name__)


def _activity(entries, viewer):
    """Pair likes or saved posts with their fully serialised blogs."""
    blogs = serialize_blogs([blog_row(entry.blog) for entry in entries], viewer)
    return [
        {"id": entry.id, "created_at": entry.created_at, "blog": blog}
        for entry, blog in zip(entries, blogs)
    ]


"""
Follow endpoints
"""


@router.post(
    "/follow/{user_id}",
    response={200: FollowState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def follow_user(request: HttpRequest, user_id: int):
    user = request.auth
    if user.id == user_id:
        return 400, {"message": "You can't follow yourself"}

    if not User.objects.filter(id=user_id).exists():
        return 404, {"message": "User not found"}

    try:
        # Following twice leaves a single edge
        Follow.objects.bulk_create(
            [Follow(follower=user, following_id=user_id)], ignore_conflicts=True
        )
    except IntegrityError:
        return 404, {"message": "User not found"}

    return 200, {"following": True}


def _unfollow(user: User, user_id: int):
    if user.id != user_id:
        Follow.objects.filter(follower=user, following_id=user_id).delete()
    return 200, {"following": False}


@router.delete(
    "/follow/{user_id}",
    response={200: FollowState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def unfollow_user(request: HttpRequest, user_id: int):
    return _unfollow(request.auth, user_id)


@router.post(
    "/unfollow/{user_id}",
    response={200: FollowState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def unfollow_user_legacy(request: HttpRequest, user_id: int):
    return _unfollow(request.auth, user_id)


@router.get(
    "/follow/status/{user_id}",
    response={200: FollowState, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def follow_status(request: HttpRequest, user_id: int):
    return 200, {"following": is_following(request.auth, user_id)}


@router.get(
    "/{user_id}/followers",
    response={200: UserList, codes_4xx: Message, codes_5xx: Message},
)
def list_followers(request: HttpRequest, user_id: int):
    if not User.objects.filter(id=user_id).exists():
        return 404, {"message": "User not found"}

    edges = (
        Follow.objects.filter(following_id=user_id)
        .select_related("follower")
        .order_by("-created_at", "-id")
    )
    users = [UserBrief.from_model(edge.follower) for edge in edges]
    return 200, {"count": len(users), "users": users}


@router.get(
    "/{user_id}/following",
    response={200: UserList, codes_4xx: Message, codes_5xx: Message},
)
def list_following(request: HttpRequest, user_id: int):
    if not User.objects.filter(id=user_id).exists():
        return 404, {"message": "User not found"}

    edges = (
        Follow.objects.filter(follower_id=user_id)
        .select_related("following")
        .order_by("-created_at", "-id")
    )
    users = [UserBrief.from_model(edge.following) for edge in edges]
    return 200, {"count": len(users), "users": users}


"""
Profile endpoints
"""


@router.get(
    "/profile/{user_id}",
    response={200: ProfileOut, codes_4xx: Message, codes_5xx: Message},
    auth=OptionalJWTAuth,
    by_alias=True,
)
def get_profile(request: HttpRequest, user_id: int):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        return 404, {"message": "User not found"}

    stats = profile_stats(user_id)
    viewer = get_viewer(request)

    profile = {
        **UserBrief.from_model(user),
        "follower_count": stats["follower_count"],
        "following_count": stats["following_count"],
        "blog_count": stats["blog_count"],
        "is_following": is_following(viewer, user.id),
    }
    return 200, {"profile": profile, "stats": stats}


@router.get(
    "/profile/{user_id}/posts",
    response={200: ProfileBlogs, codes_4xx: Message, codes_5xx: Message},
    auth=OptionalJWTAuth,
    by_alias=True,
)
def get_profile_posts(request: HttpRequest, user_id: int):
    if not User.objects.filter(id=user_id).exists():
        return 404, {"message": "User not found"}

    blogs = Blog.objects.filter(author_id=user_id).select_related("author").order_by(
        "-id"
    )
    rows = [blog_row(blog) for blog in blogs]
    return 200, {"blogs": serialize_blogs(rows, get_viewer(request))}


@router.get(
    "/profile/{user_id}/likes",
    response={200: ProfileLikes, codes_4xx: Message, codes_5xx: Message},
    auth=OptionalJWTAuth,
    by_alias=True,
)
def get_profile_likes(request: HttpRequest, user_id: int):
    if not User.objects.filter(id=user_id).exists():
        return 404, {"message": "User not found"}

    likes = list(
        Like.objects.filter(user_id=user_id)
        .select_related("blog__author")
        .order_by("-created_at", "-id")
    )
    return 200, {"likes": _activity(likes, get_viewer(request))}


@router.get(
    "/profile/{user_id}/comments",
    response={200: ProfileComments, codes_4xx: Message, codes_5xx: Message},
    by_alias=True,
)
def get_profile_comments(request: HttpRequest, user_id: int):
    if not User.objects.filter(id=user_id).exists():
        return 404, {"message": "User not found"}

    comments = (
        Comment.objects.filter(author_id=user_id)
        .select_related("blog")
        .order_by("-created_at", "-id")
    )
    return 200, {
        "comments": [
            {
                "id": comment.id,
                "content": comment.content,
                "created_at": comment.created_at,
                "blog_id": comment.blog_id,
                "blog": {"id": comment.blog.id, "title": comment.blog.title},
            }
            for comment in comments
        ]
    }


@router.get(
    "/profile/{user_id}/saved",
    response={200: ProfileSaved, codes_4xx: Message, codes_5xx: Message},
    auth=OptionalJWTAuth,
    by_alias=True,
)
def get_profile_saved(request: HttpRequest, user_id: int):
    viewer = get_viewer(request)
    # Saved posts are private to their owner
    if viewer is None or viewer.pk != user_id:
        return 403, {"message": "Access denied - saved posts are private"}

    saved = list(
        SavedPost.objects.filter(user_id=user_id)
        .select_related("blog__author")
        .order_by("-created_at", "-id")
    )
    return 200, {"saved_posts": _activity(saved, viewer)}


@router.delete(
    "/profile/followers/{follower_id}",
    response={200: Success, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def remove_follower(request: HttpRequest, follower_id: int):
    Follow.objects.filter(follower_id=follower_id, following=request.auth).delete()
    return 200, {"success": True}


@router.delete(
    "/profile/comments/{comment_id}",
    response={200: Success, codes_4xx: Message, codes_5xx: Message},
    auth=JWTAuth(),
)
def delete_comment(request: HttpRequest, comment_id: int):
    with transaction.atomic():
        comment = Comment.objects.select_for_update().filter(id=comment_id).first()
        if comment is None:
            return 404, {"message": "Comment not found"}
        if not is_owner(request.auth, comment):
            return 403, {
                "message": "Access denied - you can only delete your own comments"
            }
        comment.delete()

    logger.info(f"User {request.auth.id} deleted comment {comment_id}")
    return 200, {"success": True}
