from typing import Optional

from django.contrib.auth.base_user import AbstractBaseUser


def is_owner(
    actor: Optional[AbstractBaseUser], resource, owner_field: str = "author_id"
) -> bool:
    """
    True when ``actor`` owns ``resource``.

    ``owner_field`` names the attribute on the resource holding the owner's
    primary key (``author_id`` for blogs and comments, ``following_id`` for a
    follow edge seen from the followed user).
    """
    if actor is None or resource is None:
        return False
    return actor.pk == getattr(resource, owner_field)
