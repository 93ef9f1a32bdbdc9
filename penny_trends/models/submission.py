"""Data models for Reddit posts and their sampled comments."""

from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Comment(BaseModel):
    """
    A reply sampled from a post's comment thread.

    Field aliases follow the Reddit listing keys so a comment can be validated
    straight from the API payload and serialized back in the same shape.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    body: str = ""
    score: int = 0
    created_at: float = Field(alias="created_utc")
    author: str = "[deleted]"

    @field_validator("body", "author", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info) -> Any:
        if value is None:
            return "" if info.field_name == "body" else "[deleted]"
        return value


class Post(BaseModel):
    """
    A Reddit submission. Identity is ``id``; instances are immutable once fetched.

    Sampled comments are attached with ``with_comments`` which returns a copy.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    body: str = Field(default="", alias="selftext")
    score: int = 0
    created_at: float = Field(alias="created_utc")
    forum_name: str = Field(alias="subreddit")
    permalink: str
    author: str = "[deleted]"
    comments: Tuple[Comment, ...] = ()

    @field_validator("body", "author", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info) -> Any:
        if value is None:
            return "" if info.field_name == "body" else "[deleted]"
        return value

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def with_comments(self, comments) -> "Post":
        return self.model_copy(update={"comments": tuple(comments)})

    @property
    def content(self) -> str:
        """Title and body joined the way sentiment is scored."""
        return f"{self.title}\n{self.body}"
