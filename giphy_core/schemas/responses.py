from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from giphy_core.schemas.media import Category, Media, TermSuggestion


class Meta(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    status: int
    msg: str
    response_id: str


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    total_count: int
    count: int
    offset: int


class GiphyResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    meta: Meta

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.meta.response_id} status: {self.meta.status} msg: {self.meta.msg})"


class MediaResponse(GiphyResponse):
    data: Media | None = None


class ListMediaResponse(GiphyResponse):
    data: list[Media] | None = None
    pagination: Pagination | None = None


class ListTermSuggestionResponse(GiphyResponse):
    data: list[TermSuggestion] | None = None


class ListCategoryResponse(GiphyResponse):
    data: list[Category] | None = None
    pagination: Pagination | None = None
