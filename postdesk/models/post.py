"""Post models for the posts API wire format."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from postdesk.kernel.types import FIELD_RULES, Post

_TITLE_MIN, _TITLE_MAX = FIELD_RULES["title"]
_DESCRIPTION_MIN, _DESCRIPTION_MAX = FIELD_RULES["description"]
_CONTENT_MIN, _CONTENT_MAX = FIELD_RULES["content"]


class CreatePostRequest(BaseModel):
    """What the client sends to create a post."""

    model_config = {"extra": "forbid"}

    author_id: int
    title: str = Field(min_length=_TITLE_MIN, max_length=_TITLE_MAX)
    description: str = Field(min_length=_DESCRIPTION_MIN, max_length=_DESCRIPTION_MAX)
    content: str = Field(min_length=_CONTENT_MIN, max_length=_CONTENT_MAX)


class UpdatePostRequest(BaseModel):
    """What the client sends to update a post. author_id and date never change."""

    model_config = {"extra": "forbid"}

    title: str = Field(min_length=_TITLE_MIN, max_length=_TITLE_MAX)
    description: str = Field(min_length=_DESCRIPTION_MIN, max_length=_DESCRIPTION_MAX)
    content: str = Field(min_length=_CONTENT_MIN, max_length=_CONTENT_MAX)


class PostResponse(BaseModel):
    """What the API returns for a post. Ids may arrive as numbers or strings."""

    id: int | str
    title: str
    description: str
    content: str
    author_id: int
    date: datetime

    def to_post(self) -> Post:
        """Convert the wire shape to the kernel's Post."""
        date = self.date if self.date.tzinfo is not None else self.date.replace(tzinfo=UTC)
        return Post(
            id=str(self.id),
            title=self.title,
            description=self.description,
            content=self.content,
            author_id=self.author_id,
            date=date,
        )
