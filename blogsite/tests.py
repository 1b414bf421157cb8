from unittest.mock import patch

from django.db import OperationalError
from django.test import TestCase, override_settings

from blogsite.permissions import is_owner
from blogsite.testing import APITestCase
from blogs.models import Blog
from users.models import User


class MiscEndpointsTest(TestCase):
    def test_index(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Backend server is running!"})

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "Connected")

    @patch("blogsite.urls.connection")
    def test_health_database_down(self, connection):
        connection.cursor.side_effect = OperationalError("down")
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "Error")


class OwnershipTest(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(username="owner", password="password123")
        self.other = User.objects.create_user(username="other", password="password123")
        self.blog = Blog.objects.create(author=self.owner, title="T", content="C")

    def test_is_owner(self):
        self.assertTrue(is_owner(self.owner, self.blog))
        self.assertFalse(is_owner(self.other, self.blog))
        self.assertFalse(is_owner(None, self.blog))
        self.assertFalse(is_owner(self.owner, None))


class StoreUnavailableTest(APITestCase):
    def test_operational_error_maps_to_503(self):
        user = self.make_user()
        with patch(
            "blogs.api.load_blog_rows", side_effect=OperationalError("connection lost")
        ):
            response = self.get("/api/v1/blog/bulk", user=user)
        self.assertEqual(response.status_code, 503)


class RequestTimingMiddlewareTest(APITestCase):
    @override_settings(DEBUG=True)
    def test_logs_query_count_in_debug(self):
        with self.assertLogs("blogsite.middleware", level="INFO") as logs:
            self.client.get("/health")
        self.assertIn("Request: GET /health status=200", logs.output[0])
        self.assertIn("queries=1", logs.output[0])

    def test_silent_without_debug(self):
        with self.assertNoLogs("blogsite.middleware", level="INFO"):
            self.client.get("/")
