from unittest.mock import patch

from django.core.cache import cache
from django.test import TestCase, override_settings

from blogs.cache import blog_cache, invalidate_blog, load_blog_row, load_blog_rows
from blogs.models import Blog
from blogsite.cache import ReadThroughCache
from blogsite.testing import APITestCase
from users.models import User


@override_settings(BLOG_CACHE_ENABLED=True)
class ReadThroughCacheTest(TestCase):
    def setUp(self):
        cache.clear()
        self.cache = ReadThroughCache("test", ttl=60)

    def test_get_or_load_calls_loader_once(self):
        calls = []

        def loader():
            calls.append(1)
            return {"value": 1}

        self.assertEqual(self.cache.get_or_load("k", loader), {"value": 1})
        self.assertEqual(self.cache.get_or_load("k", loader), {"value": 1})
        self.assertEqual(len(calls), 1)

    def test_entries_expire_on_lookup(self):
        with patch("blogsite.cache.time.time", return_value=1000.0):
            self.cache.set("k", "v")
        with patch("blogsite.cache.time.time", return_value=1030.0):
            self.assertEqual(self.cache.get("k"), "v")
        with patch("blogsite.cache.time.time", return_value=1061.0):
            self.assertIsNone(self.cache.get("k"))
        # The stale entry was dropped
        self.assertIsNone(cache.get("test:k"))

    def test_invalidate(self):
        self.cache.set("k", "v")
        self.cache.invalidate("k")
        self.assertIsNone(self.cache.get("k"))

    @override_settings(BLOG_CACHE_ENABLED=False)
    def test_disabled_cache_always_loads(self):
        calls = []
        self.assertFalse(self.cache.set("k", "v"))
        self.cache.get_or_load("k", lambda: calls.append(1))
        self.cache.get_or_load("k", lambda: calls.append(1))
        self.assertEqual(len(calls), 2)

    def test_backend_failure_is_a_miss(self):
        with patch("blogsite.cache.caches") as caches:
            caches.__getitem__.return_value.get.side_effect = ConnectionError("down")
            caches.__getitem__.return_value.set.side_effect = ConnectionError("down")
            self.assertEqual(self.cache.get_or_load("k", lambda: "fresh"), "fresh")


@override_settings(BLOG_CACHE_ENABLED=True)
class BlogCacheTest(TestCase):
    def setUp(self):
        cache.clear()
        self.author = User.objects.create_user(username="writer", password="password123")
        self.blog = Blog.objects.create(author=self.author, title="Cached", content="C")

    def test_row_is_served_from_cache(self):
        load_blog_row(self.blog.id)
        Blog.objects.filter(id=self.blog.id).update(title="Changed behind our back")

        with self.assertNumQueries(0):
            row = load_blog_row(self.blog.id)
        self.assertEqual(row["title"], "Cached")

        invalidate_blog(self.blog.id)
        self.assertEqual(load_blog_row(self.blog.id)["title"], "Changed behind our back")

    def test_missing_rows_are_not_cached(self):
        self.assertIsNone(load_blog_row(999999))
        self.assertIsNone(blog_cache.get(999999))

    def test_listing_invalidation(self):
        self.assertEqual(len(load_blog_rows()), 1)
        Blog.objects.create(author=self.author, title="Second", content="C")
        self.assertEqual(len(load_blog_rows()), 1)

        invalidate_blog()
        self.assertEqual(len(load_blog_rows()), 2)


@override_settings(BLOG_CACHE_ENABLED=True)
class BlogCacheInvalidationAPITest(APITestCase):
    def setUp(self):
        super().setUp()
        self.author = self.make_user()

    def test_writes_invalidate_cached_rows(self):
        created = self.post(
            "/api/v1/blog", {"title": "One", "content": "Body"}, user=self.author
        ).json()
        self.assertEqual(len(self.get("/api/v1/blog/bulk", user=self.author).json()["blogs"]), 1)
        self.get(f"/api/v1/blog/{created['id']}", user=self.author)

        self.put(
            "/api/v1/blog",
            {"id": created["id"], "title": "Renamed", "content": "Body"},
            user=self.author,
        )
        detail = self.get(f"/api/v1/blog/{created['id']}", user=self.author).json()
        self.assertEqual(detail["blog"]["title"], "Renamed")
        listing = self.get("/api/v1/blog/bulk", user=self.author).json()
        self.assertEqual(listing["blogs"][0]["title"], "Renamed")

        self.post("/api/v1/blog", {"title": "Two", "content": "Body"}, user=self.author)
        listing = self.get("/api/v1/blog/bulk", user=self.author).json()
        self.assertEqual(len(listing["blogs"]), 2)

        self.delete(f"/api/v1/blog/{created['id']}", user=self.author)
        listing = self.get("/api/v1/blog/bulk", user=self.author).json()
        self.assertEqual([b["title"] for b in listing["blogs"]], ["Two"])

    def test_counts_are_never_stale(self):
        blog = Blog.objects.create(author=self.author, title="T", content="C")
        reader = self.make_user()
        self.get(f"/api/v1/blog/{blog.id}", user=reader)

        self.post(f"/api/v1/blog/{blog.id}/like", user=reader)
        data = self.get(f"/api/v1/blog/{blog.id}", user=reader).json()["blog"]
        self.assertEqual(data["likeCount"], 1)
        self.assertTrue(data["liked"])


@override_settings(BLOG_CACHE_ENABLED=False)
class UncachedBlogAPITest(BlogCacheInvalidationAPITest):
    """Same write/read flows with the cache switched off."""

    def test_nothing_is_stored(self):
        blog = Blog.objects.create(author=self.author, title="T", content="C")
        self.get(f"/api/v1/blog/{blog.id}", user=self.author)
        self.get("/api/v1/blog/bulk", user=self.author)
        self.assertIsNone(cache.get(blog_cache.make_key(blog.id)))
        self.assertIsNone(cache.get(blog_cache.make_key("list")))
