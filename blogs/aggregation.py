"""
Engagement aggregation for blog listings and profiles.

Counts are always derived from the relation tables with correlated COUNT
subqueries, so a row never fans out across likes and comments and a listing
costs the same number of queries whatever its length.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from django.db.models import Count, IntegerField, OuterRef, QuerySet, Subquery
from django.db.models.functions import Coalesce

from blogs.models import Blog, Comment, Like, SavedPost
from blogsite.schemas import UserBrief
from users.models import Follow, User


def _count_of(model, field: str):
    """Correlated ``COUNT(*)`` of ``model`` rows whose ``field`` is the outer pk."""
    subquery = (
        model.objects.filter(**{field: OuterRef("pk")})
        .order_by()
        .values(field)
        .annotate(total=Count("pk"))
        .values("total")[:1]
    )
    return Coalesce(Subquery(subquery, output_field=IntegerField()), 0)


def annotate_engagement(queryset: QuerySet) -> QuerySet:
    return queryset.annotate(
        like_count=_count_of(Like, "blog"),
        comment_count=_count_of(Comment, "blog"),
    )


def blog_counts(blog_ids: Iterable[int]) -> Dict[int, Tuple[int, int]]:
    """Map each blog id to ``(like_count, comment_count)`` in a single query."""
    blog_ids = list(blog_ids)
    if not blog_ids:
        return {}

    rows = annotate_engagement(Blog.objects.filter(id__in=blog_ids).order_by()).values(
        "id", "like_count", "comment_count"
    )
    return {row["id"]: (row["like_count"], row["comment_count"]) for row in rows}


def viewer_flags(
    blog_ids: Iterable[int], viewer: Optional[User]
) -> Tuple[Set[int], Set[int]]:
    """
    Ids of the blogs ``viewer`` has liked and saved among ``blog_ids``.

    Two queries at most; none for anonymous viewers or an empty page.
    """
    blog_ids = list(blog_ids)
    if viewer is None or not blog_ids:
        return set(), set()

    liked = set(
        Like.objects.filter(user=viewer, blog_id__in=blog_ids).values_list(
            "blog_id", flat=True
        )
    )
    saved = set(
        SavedPost.objects.filter(user=viewer, blog_id__in=blog_ids).values_list(
            "blog_id", flat=True
        )
    )
    return liked, saved


def like_count(blog_id: int) -> int:
    return Like.objects.filter(blog_id=blog_id).count()


def blog_row(blog: Blog) -> dict:
    """Viewer independent part of a blog payload. Safe to cache."""
    return {
        "id": blog.id,
        "title": blog.title,
        "content": blog.content,
        "published": blog.published,
        "created_at": blog.created_at,
        "author": UserBrief.from_model(blog.author),
    }


def serialize_blogs(rows: List[dict], viewer: Optional[User]) -> List[dict]:
    """
    Attach fresh counts and the viewer's liked/saved flags to ``rows``.

    ``rows`` are dicts as produced by ``blog_row``; they are copied, never
    mutated, because they may come straight from the cache.
    """
    ids = [row["id"] for row in rows]
    counts = blog_counts(ids)
    liked, saved = viewer_flags(ids, viewer)

    result = []
    for row in rows:
        likes, comments = counts.get(row["id"], (0, 0))
        result.append(
            {
                **row,
                "like_count": likes,
                "comment_count": comments,
                "liked": row["id"] in liked,
                "saved": row["id"] in saved,
            }
        )
    return result


def profile_stats(user_id: int) -> Optional[dict]:
    """
    Follower, following, blog, like, comment and saved counts for a user in
    one query. None when the user does not exist.
    """
    stats = (
        User.objects.filter(id=user_id)
        .annotate(
            follower_count=_count_of(Follow, "following"),
            following_count=_count_of(Follow, "follower"),
            blog_count=_count_of(Blog, "author"),
            like_count=_count_of(Like, "user"),
            comment_count=_count_of(Comment, "author"),
            saved_count=_count_of(SavedPost, "user"),
        )
        .values(
            "follower_count",
            "following_count",
            "blog_count",
            "like_count",
            "comment_count",
            "saved_count",
        )
        .first()
    )
    return stats


def is_following(viewer: Optional[User], subject_id: int) -> bool:
    """False for anonymous viewers and for a viewer looking at themselves."""
    if viewer is None or viewer.pk == subject_id:
        return False
    return Follow.objects.filter(follower=viewer, following_id=subject_id).exists()
