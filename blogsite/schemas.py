"""
Common schema for all the apps
"""

from ninja import Schema
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class Message(Schema):
    message: str


class CamelSchema(Schema):
    """
    Output schemas serialise with camelCase keys (``likeCount``,
    ``createdAt``). Handlers build them from snake_case dicts.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserBrief(CamelSchema):
    id: int
    name: str
    username: str

    @staticmethod
    def from_model(user) -> dict:
        return {"id": user.id, "name": user.display_name, "username": user.username}
