from blogs.models import Blog, Comment, Like, SavedPost
from blogsite.testing import APITestCase, fake


class BlogCrudTestCase(APITestCase):
    def setUp(self):
        super().setUp()
        self.author = self.make_user(username="writer", name="Writer")
        self.reader = self.make_user(username="reader")

    def test_create_blog(self):
        response = self.post(
            "/api/v1/blog",
            {"title": "Hello", "content": fake.paragraph()},
            user=self.author,
        )
        self.assertEqual(response.status_code, 200)

        blog = Blog.objects.get(id=response.json()["id"])
        self.assertEqual(blog.author, self.author)
        self.assertFalse(blog.published)

    def test_create_blog_requires_title(self):
        response = self.post("/api/v1/blog", {"content": "Body"}, user=self.author)
        self.assertEqual(response.status_code, 411)
        self.assertFalse(Blog.objects.exists())

    def test_create_blog_requires_auth(self):
        response = self.post("/api/v1/blog", {"title": "Hello", "content": "Body"})
        self.assertEqual(response.status_code, 401)

    def test_update_blog(self):
        blog = Blog.objects.create(author=self.author, title="Old", content="Old")
        response = self.put(
            "/api/v1/blog",
            {"id": blog.id, "title": "New", "content": "New body"},
            user=self.author,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"id": blog.id})

        blog.refresh_from_db()
        self.assertEqual(blog.title, "New")
        self.assertEqual(blog.content, "New body")

    def test_update_by_non_author(self):
        blog = Blog.objects.create(author=self.author, title="Old", content="Old")
        response = self.put(
            "/api/v1/blog",
            {"id": blog.id, "title": "Hijacked", "content": "x"},
            user=self.reader,
        )
        self.assertEqual(response.status_code, 403)
        blog.refresh_from_db()
        self.assertEqual(blog.title, "Old")

    def test_update_missing_blog(self):
        response = self.put(
            "/api/v1/blog",
            {"id": 999999, "title": "New", "content": "x"},
            user=self.author,
        )
        self.assertEqual(response.status_code, 404)

    def test_get_blog(self):
        blog = Blog.objects.create(author=self.author, title="Hello", content="Body")
        Like.objects.create(user=self.reader, blog=blog)
        Comment.objects.create(author=self.reader, blog=blog, content="Nice")

        response = self.get(f"/api/v1/blog/{blog.id}", user=self.reader)
        self.assertEqual(response.status_code, 200)

        data = response.json()["blog"]
        self.assertEqual(data["title"], "Hello")
        self.assertEqual(
            data["author"], {"id": self.author.id, "name": "Writer", "username": "writer"}
        )
        self.assertEqual(data["likeCount"], 1)
        self.assertEqual(data["commentCount"], 1)
        self.assertTrue(data["liked"])
        self.assertFalse(data["saved"])
        self.assertIn("createdAt", data)

    def test_get_missing_blog(self):
        response = self.get("/api/v1/blog/999999", user=self.reader)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Blog not found")

    def test_bulk_lists_newest_first(self):
        older = Blog.objects.create(author=self.author, title="Older", content="a")
        newer = Blog.objects.create(author=self.author, title="Newer", content="b")

        response = self.get("/api/v1/blog/bulk", user=self.reader)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [b["id"] for b in response.json()["blogs"]], [newer.id, older.id]
        )

    def test_delete_blog_cascades(self):
        blog = Blog.objects.create(author=self.author, title="Bye", content="Body")
        Like.objects.create(user=self.reader, blog=blog)
        SavedPost.objects.create(user=self.reader, blog=blog)
        parent = Comment.objects.create(author=self.reader, blog=blog, content="c")
        Comment.objects.create(author=self.author, blog=blog, parent=parent, content="r")

        response = self.delete(f"/api/v1/blog/{blog.id}", user=self.author)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"deleted": True})

        self.assertFalse(Blog.objects.filter(id=blog.id).exists())
        self.assertFalse(Like.objects.exists())
        self.assertFalse(SavedPost.objects.exists())
        self.assertFalse(Comment.objects.exists())
        self.assertEqual(self.get(f"/api/v1/blog/{blog.id}", user=self.author).status_code, 404)

    def test_delete_by_non_author(self):
        blog = Blog.objects.create(author=self.author, title="Keep", content="Body")
        response = self.delete(f"/api/v1/blog/{blog.id}", user=self.reader)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json()["message"],
            "Access denied - you can only delete your own posts",
        )
        self.assertTrue(Blog.objects.filter(id=blog.id).exists())

    def test_delete_missing_blog(self):
        response = self.delete("/api/v1/blog/999999", user=self.author)
        self.assertEqual(response.status_code, 404)


class LikeAPITestCase(APITestCase):
    def setUp(self):
        super().setUp()
        self.author = self.make_user()
        self.reader = self.make_user()
        self.blog = Blog.objects.create(author=self.author, title="T", content="C")
        self.url = f"/api/v1/blog/{self.blog.id}/like"

    def test_like_is_idempotent(self):
        first = self.post(self.url, user=self.reader)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"liked": True, "likeCount": 1})

        second = self.post(self.url, user=self.reader)
        self.assertEqual(second.json(), {"liked": True, "likeCount": 1})
        self.assertEqual(Like.objects.filter(blog=self.blog).count(), 1)

        unliked = self.delete(self.url, user=self.reader)
        self.assertEqual(unliked.json(), {"liked": False, "likeCount": 0})

    def test_like_counts_every_user(self):
        self.post(self.url, user=self.reader)
        response = self.post(self.url, user=self.author)
        self.assertEqual(response.json(), {"liked": True, "likeCount": 2})

    def test_unlike_without_like(self):
        response = self.delete(self.url, user=self.reader)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"liked": False, "likeCount": 0})

    def test_like_missing_blog(self):
        response = self.post("/api/v1/blog/999999/like", user=self.reader)
        self.assertEqual(response.status_code, 404)
        self.assertFalse(Like.objects.exists())

    def test_like_status(self):
        url = f"/api/v1/blog/{self.blog.id}/likes"
        self.assertEqual(
            self.get(url, user=self.reader).json(), {"liked": False, "likeCount": 0}
        )
        self.post(self.url, user=self.reader)
        self.assertEqual(
            self.get(url, user=self.reader).json(), {"liked": True, "likeCount": 1}
        )
        self.assertEqual(
            self.get(url, user=self.author).json(), {"liked": False, "likeCount": 1}
        )


class SaveAPITestCase(APITestCase):
    def setUp(self):
        super().setUp()
        self.reader = self.make_user()
        self.blog = Blog.objects.create(author=self.make_user(), title="T", content="C")
        self.url = f"/api/v1/blog/{self.blog.id}/save"

    def test_save_and_unsave(self):
        self.assertEqual(self.post(self.url, user=self.reader).json(), {"saved": True})
        self.assertEqual(self.post(self.url, user=self.reader).json(), {"saved": True})
        self.assertEqual(SavedPost.objects.count(), 1)

        status_url = f"/api/v1/blog/{self.blog.id}/saved"
        self.assertEqual(self.get(status_url, user=self.reader).json(), {"saved": True})

        self.assertEqual(self.delete(self.url, user=self.reader).json(), {"saved": False})
        self.assertEqual(self.delete(self.url, user=self.reader).json(), {"saved": False})
        self.assertEqual(self.get(status_url, user=self.reader).json(), {"saved": False})

    def test_save_missing_blog(self):
        response = self.post("/api/v1/blog/999999/save", user=self.reader)
        self.assertEqual(response.status_code, 404)
