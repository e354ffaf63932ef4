from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from giphy_core.schemas.enums import MediaType, RenditionType


class Image(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str | None = None
    width: int | None = None
    height: int | None = None
    size: int | None = None
    frames: int | None = None
    mp4: str | None = None
    mp4_size: int | None = None
    webp: str | None = None
    webp_size: int | None = None

    @field_validator("width", "height", "size", "frames", "mp4_size", "webp_size", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        # The API sends "" for dimensions it doesn't know.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class User(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    profile_url: str | None = None
    is_verified: bool = False


class Media(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    type: str = Field(default="gif")
    slug: str | None = None
    url: str | None = None
    bitly_url: str | None = None
    embed_url: str | None = None
    username: str | None = None
    source: str | None = None
    title: str | None = None
    rating: str | None = None
    content_url: str | None = None
    import_datetime: str | None = None
    trending_datetime: str | None = None
    is_sticker: bool = False
    images: dict[str, Image] = Field(default_factory=dict)
    user: User | None = None

    media_type: MediaType = MediaType.GIF
    rendition: RenditionType = RenditionType.ORIGINAL

    @property
    def preferred_image(self) -> Image | None:
        return self.images.get(self.rendition.value)

    def __str__(self) -> str:
        return f"Media({self.id} type: {self.type} rating: {self.rating} url: {self.url})"


class TermSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str


class Category(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    name_encoded: str
    subcategories: list[Category] = Field(default_factory=list)
    gif: Media | None = None

    def __str__(self) -> str:
        return f"Category({self.name_encoded} subcategories: {len(self.subcategories)})"
