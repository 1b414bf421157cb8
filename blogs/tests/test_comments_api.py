from blogs.models import Blog, Comment
from blogsite.testing import APITestCase


class CommentAPITestCase(APITestCase):
    def setUp(self):
        super().setUp()
        self.author = self.make_user(username="writer", name="Writer")
        self.reader = self.make_user(username="reader", name="Reader")
        self.blog = Blog.objects.create(author=self.author, title="T", content="C")
        self.url = f"/api/v1/blog/{self.blog.id}/comments"

    def test_create_comment(self):
        response = self.post(self.url, {"content": "  Great post  "}, user=self.reader)
        self.assertEqual(response.status_code, 200)

        comment = response.json()["comment"]
        self.assertEqual(comment["content"], "Great post")
        self.assertEqual(comment["blogId"], self.blog.id)
        self.assertIsNone(comment["parentId"])
        self.assertEqual(
            comment["user"], {"id": self.reader.id, "name": "Reader", "username": "reader"}
        )
        self.assertEqual(comment["replies"], [])

    def test_empty_comment_is_rejected(self):
        for content in ("", "   "):
            response = self.post(self.url, {"content": content}, user=self.reader)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["message"], "Comment content is required")
        self.assertFalse(Comment.objects.exists())

    def test_comment_on_missing_blog(self):
        response = self.post(
            "/api/v1/blog/999999/comments", {"content": "Hi"}, user=self.reader
        )
        self.assertEqual(response.status_code, 404)

    def test_reply(self):
        parent = Comment.objects.create(author=self.author, blog=self.blog, content="Q")
        response = self.post(
            f"/api/v1/blog/comment/{parent.id}/reply",
            {"content": "A"},
            user=self.reader,
        )
        self.assertEqual(response.status_code, 200)

        reply = response.json()["reply"]
        self.assertEqual(reply["parentId"], parent.id)
        self.assertEqual(reply["blogId"], self.blog.id)
        self.assertEqual(Comment.objects.get(id=reply["id"]).blog_id, self.blog.id)
        # Replies never carry a nested list, not even an empty one
        self.assertNotIn("replies", reply)

    def test_empty_reply_is_rejected(self):
        parent = Comment.objects.create(author=self.author, blog=self.blog, content="Q")
        response = self.post(
            f"/api/v1/blog/comment/{parent.id}/reply", {"content": " "}, user=self.reader
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Reply content is required")

    def test_reply_to_missing_parent(self):
        response = self.post(
            "/api/v1/blog/comment/999999/reply", {"content": "A"}, user=self.reader
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Parent comment not found")

    def test_reply_to_reply_is_rejected(self):
        parent = Comment.objects.create(author=self.author, blog=self.blog, content="Q")
        reply = Comment.objects.create(
            author=self.reader, blog=self.blog, parent=parent, content="A"
        )
        response = self.post(
            f"/api/v1/blog/comment/{reply.id}/reply", {"content": "B"}, user=self.author
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Comment.objects.count(), 2)

    def test_thread_ordering(self):
        older = Comment.objects.create(author=self.author, blog=self.blog, content="1")
        newer = Comment.objects.create(author=self.reader, blog=self.blog, content="2")
        first_reply = Comment.objects.create(
            author=self.reader, blog=self.blog, parent=older, content="1a"
        )
        second_reply = Comment.objects.create(
            author=self.author, blog=self.blog, parent=older, content="1b"
        )

        response = self.get(self.url, user=self.reader)
        self.assertEqual(response.status_code, 200)

        comments = response.json()["comments"]
        # Top level newest first, replies oldest first
        self.assertEqual([c["id"] for c in comments], [newer.id, older.id])
        self.assertEqual(comments[0]["replies"], [])
        self.assertEqual(
            [r["id"] for r in comments[1]["replies"]], [first_reply.id, second_reply.id]
        )
        self.assertEqual(comments[1]["replies"][0]["user"]["username"], "reader")
        for nested in comments[1]["replies"]:
            self.assertNotIn("replies", nested)
            self.assertEqual(nested["parentId"], older.id)

    def test_comments_of_missing_blog(self):
        response = self.get("/api/v1/blog/999999/comments", user=self.reader)
        self.assertEqual(response.status_code, 404)
