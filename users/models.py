"""
Holds the User model, its manager and the Follow relation.
"""

import bcrypt
from django.contrib.auth.hashers import UNUSABLE_PASSWORD_PREFIX, identify_hasher
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.crypto import constant_time_compare
from django.utils.translation import gettext_lazy as _

# Hash formats written by the old Node backend (bcryptjs)
LEGACY_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class UserManager(BaseUserManager):
    """
    Custom user manager where the username is the login identifier.
    """

    def create_user(self, username, password, name=None, **extra_fields):
        """
        Create and save a User with the given username and password.
        The display name defaults to the username.
        """
        if not username:
            raise ValueError(_("The username must be set"))
        user = self.model(username=username, name=name or username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password, name=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError(_("Superuser must have is_staff=True."))
        if extra_fields.get("is_superuser") is not True:
            raise ValueError(_("Superuser must have is_superuser=True."))
        return self.create_user(username, password, name=name, **extra_fields)


class User(AbstractUser):
    """
    Blog user. ``username`` is the login identifier and never changes,
    ``name`` is what other readers see.
    """

    name = models.CharField(max_length=150, blank=True)

    objects = UserManager()

    class Meta:
        db_table = "user"

    def __str__(self):
        return self.username

    @property
    def display_name(self) -> str:
        return self.name or self.username

    def has_legacy_password(self) -> bool:
        """
        True when the stored password was imported from the old system
        (a bare bcrypt hash or plaintext) rather than a Django hash.
        """
        if not self.password or self.password.startswith(UNUSABLE_PASSWORD_PREFIX):
            return False
        try:
            identify_hasher(self.password)
        except ValueError:
            return True
        return False

    def _check_legacy_password(self, raw_password: str) -> bool:
        if self.password.startswith(LEGACY_BCRYPT_PREFIXES):
            try:
                return bcrypt.checkpw(
                    raw_password.encode("utf-8"), self.password.encode("ascii")
                )
            except ValueError:
                # Malformed hash
                return False
        return constant_time_compare(raw_password, self.password)

    def verify_password(self, raw_password: str) -> bool:
        """
        Check ``raw_password`` against the stored credential.

        Legacy records (bcrypt hashes or plaintext) are checked once and
        re-hashed on success, so every later login goes through
        ``check_password``.
        """
        if self.has_legacy_password():
            if not self._check_legacy_password(raw_password):
                return False
            self.set_password(raw_password)
            self.save(update_fields=["password"])
            return True
        return self.check_password(raw_password)


class Follow(models.Model):
    """Directed edge: ``follower`` follows ``following``."""

    follower = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="following_edges"
    )
    following = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="follower_edges"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("follower", "following")

    def __str__(self):
        return f"{self.follower.username} follows {self.following.username}"
