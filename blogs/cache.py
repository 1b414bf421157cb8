from typing import List, Optional

from blogs.aggregation import blog_row
from blogs.models import Blog
from blogsite.cache import ReadThroughCache

blog_cache = ReadThroughCache("blog")

LIST_KEY = "list"


def load_blog_row(blog_id: int) -> Optional[dict]:
    """Cached viewer independent row for one blog, None when it does not exist."""

    row = blog_cache.get(blog_id)
    if row is not None:
        return row

    blog = Blog.objects.select_related("author").filter(id=blog_id).first()
    row = blog_row(blog) if blog else None
    # Misses for unknown ids are not cached; the id may be created later.
    if row is not None:
        blog_cache.set(blog_id, row)
    return row


def load_blog_rows() -> List[dict]:
    """Cached rows for the full listing, newest first."""
    return blog_cache.get_or_load(
        LIST_KEY,
        lambda: [
            blog_row(blog)
            for blog in Blog.objects.select_related("author").order_by(
                "-created_at", "-id"
            )
        ],
    )


def invalidate_blog(blog_id: Optional[int] = None) -> None:
    if blog_id is None:
        blog_cache.invalidate(LIST_KEY)
    else:
        blog_cache.invalidate(blog_id, LIST_KEY)
