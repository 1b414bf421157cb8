from django.core.cache import cache
from django.test import TestCase
from faker import Faker

from users.auth import issue_token
from users.models import User

fake = Faker()


class APITestCase(TestCase):
    """Base test case that talks to the API through the full URLconf."""

    def setUp(self):
        super().setUp()
        # Ids are reused across tests, so cached rows must not leak
        cache.clear()

    def make_user(self, username=None, password="testpass123", name=None):
        return User.objects.create_user(
            username=username or fake.unique.user_name(),
            password=password,
            name=name,
        )

    def auth_headers(self, user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    def get(self, url, user=None):
        headers = self.auth_headers(user) if user else {}
        return self.client.get(url, headers=headers)

    def post(self, url, data=None, user=None):
        headers = self.auth_headers(user) if user else {}
        return self.client.post(
            url, data=data or {}, content_type="application/json", headers=headers
        )

    def put(self, url, data=None, user=None):
        headers = self.auth_headers(user) if user else {}
        return self.client.put(
            url, data=data or {}, content_type="application/json", headers=headers
        )

    def delete(self, url, user=None):
        headers = self.auth_headers(user) if user else {}
        return self.client.delete(url, headers=headers)
