from datetime import datetime
from typing import List, Optional

from ninja import Field, Schema

from blogs.schemas import BlogOut
from blogsite.schemas import CamelSchema, UserBrief


class SignupSchema(Schema):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=6)
    name: Optional[str] = Field(None, max_length=150)


class SigninSchema(Schema):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class FollowState(Schema):
    following: bool


class UserList(Schema):
    count: int
    users: List[UserBrief]


class ProfileSummary(CamelSchema):
    id: int
    name: str
    username: str
    follower_count: int
    following_count: int
    blog_count: int
    is_following: bool


class ProfileStats(CamelSchema):
    follower_count: int
    following_count: int
    blog_count: int
    like_count: int
    comment_count: int
    saved_count: int


class ProfileOut(Schema):
    profile: ProfileSummary
    stats: ProfileStats


class ProfileBlogs(Schema):
    blogs: List[BlogOut]


class BlogRef(Schema):
    id: int
    title: str


class ProfileComment(CamelSchema):
    id: int
    content: str
    created_at: datetime
    blog_id: int
    blog: BlogRef


class ProfileComments(Schema):
    comments: List[ProfileComment]


class BlogActivity(CamelSchema):
    """A like or a saved post, with the blog it points at."""

    id: int
    created_at: datetime
    blog: BlogOut


class ProfileLikes(Schema):
    likes: List[BlogActivity]


class ProfileSaved(CamelSchema):
    saved_posts: List[BlogActivity]


class Success(Schema):
    success: bool
