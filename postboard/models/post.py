"""Post request and response models."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from postboard.services.policy import as_utc


class PostCreate(BaseModel):
    """Body of ``POST /posts``."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    is_draft: bool = False
    published_at: datetime | None = None


class PostUpdate(BaseModel):
    """Body of ``PUT /posts/{id}``. Every field is optional; only the
    fields present in the request are applied.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    is_draft: bool | None = None
    published_at: datetime | None = None

    @field_validator("title", "content", "is_draft")
    @classmethod
    def reject_null(cls, value: object) -> object:
        """``published_at`` may be cleared; the other fields may not.

        Only runs for values present in the request body.
        """
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Author(BaseModel):
    """Public identity of a post's owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class PostOut(BaseModel):
    """A post as returned by the API, with its author embedded."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    is_draft: bool
    published_at: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: Author = Field(validation_alias=AliasChoices("owner", "author"))

    @field_validator("published_at", "created_at", "updated_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        # Stored naive; always emit an explicit UTC offset
        if value is None:
            return None
        return as_utc(value)


class PostPage(BaseModel):
    """One page of the public post listing."""

    items: list[PostOut]
    page: int
    per_page: int
    total: int
    last_page: int
