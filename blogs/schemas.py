from datetime import datetime
from typing import List, Optional

from ninja import Field, Schema

from blogsite.constants import MAX_COMMENT_LENGTH
from blogsite.schemas import CamelSchema, UserBrief


class BlogCreateSchema(Schema):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)


class BlogUpdateSchema(BlogCreateSchema):
    id: int


class CommentCreateSchema(Schema):
    content: str = Field("", max_length=MAX_COMMENT_LENGTH)


class BlogId(Schema):
    id: int


class BlogOut(CamelSchema):
    id: int
    title: str
    content: str
    published: bool
    created_at: datetime
    author: UserBrief
    like_count: int = 0
    comment_count: int = 0
    liked: bool = False
    saved: bool = False


class BlogList(Schema):
    blogs: List[BlogOut]


class BlogDetail(Schema):
    blog: BlogOut


class LikeState(CamelSchema):
    liked: bool
    like_count: int


class SaveState(Schema):
    saved: bool


class Deleted(Schema):
    deleted: bool


class CommentOut(CamelSchema):
    id: int
    content: str
    created_at: datetime
    blog_id: int
    parent_id: Optional[int] = None
    user: UserBrief
    replies: Optional[List["CommentOut"]] = None

    @staticmethod
    def from_model(comment, replies=None) -> dict:
        data = {
            "id": comment.id,
            "content": comment.content,
            "created_at": comment.created_at,
            "blog_id": comment.blog_id,
            "parent_id": comment.parent_id,
            "user": UserBrief.from_model(comment.author),
        }
        if replies is not None:
            data["replies"] = [CommentOut.from_model(reply) for reply in replies]
        return data


class CommentList(Schema):
    comments: List[CommentOut]


class CommentCreated(Schema):
    comment: CommentOut


class ReplyCreated(Schema):
    reply: CommentOut
