from __future__ import annotations

from typing import Annotated, Literal, Union
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict, Field

from giphy_core.schemas.enums import HTTPMethod, LanguageType, MediaType, RatingType, RequestType


BASE_URL = "https://api.giphy.com/v1/"

QueryItems = list[tuple[str, str]]


def _segment(value: str) -> str:
    return quote(value, safe="")


class RequestSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str
    headers: dict[str, str]
    body: bytes | None = None


class BaseEndpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: RequestType

    @property
    def method(self) -> HTTPMethod:
        return HTTPMethod.GET

    @property
    def media_type(self) -> MediaType:
        return MediaType.GIF

    def path(self) -> str:
        raise NotImplementedError

    def query(self) -> QueryItems:
        return []


class SearchEndpoint(BaseEndpoint):
    kind: Literal[RequestType.SEARCH] = RequestType.SEARCH
    query_text: str = Field(alias="query")
    media: MediaType
    offset: int
    limit: int
    rating: RatingType
    lang: LanguageType

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/search"

    def query(self) -> QueryItems:
        return [
            ("q", self.query_text),
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
            ("rating", self.rating.value),
            ("lang", self.lang.value),
        ]


class TrendingEndpoint(BaseEndpoint):
    kind: Literal[RequestType.TRENDING] = RequestType.TRENDING
    media: MediaType
    offset: int
    limit: int
    rating: RatingType

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/trending"

    def query(self) -> QueryItems:
        return [
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
            ("rating", self.rating.value),
        ]


class TranslateEndpoint(BaseEndpoint):
    kind: Literal[RequestType.TRANSLATE] = RequestType.TRANSLATE
    term: str
    media: MediaType
    rating: RatingType
    lang: LanguageType

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/translate"

    def query(self) -> QueryItems:
        return [
            ("s", self.term),
            ("rating", self.rating.value),
            ("lang", self.lang.value),
        ]


class RandomEndpoint(BaseEndpoint):
    kind: Literal[RequestType.RANDOM] = RequestType.RANDOM
    tag: str
    media: MediaType
    rating: RatingType

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/random"

    def query(self) -> QueryItems:
        return [("tag", self.tag), ("rating", self.rating.value)]


class GetEndpoint(BaseEndpoint):
    kind: Literal[RequestType.GET] = RequestType.GET
    id: str

    def path(self) -> str:
        return f"gifs/{_segment(self.id)}"


class GetAllEndpoint(BaseEndpoint):
    kind: Literal[RequestType.GET_ALL] = RequestType.GET_ALL
    ids: tuple[str, ...]

    def path(self) -> str:
        return "gifs"

    def query(self) -> QueryItems:
        return [("ids", ",".join(self.ids))]


class TermSuggestionsEndpoint(BaseEndpoint):
    kind: Literal[RequestType.TERM_SUGGESTIONS] = RequestType.TERM_SUGGESTIONS
    term: str

    def path(self) -> str:
        return f"queries/suggest/{_segment(self.term)}"


class CategoriesEndpoint(BaseEndpoint):
    kind: Literal[RequestType.CATEGORIES] = RequestType.CATEGORIES
    media: MediaType
    offset: int
    limit: int
    sort: str

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/categories"

    def query(self) -> QueryItems:
        return [
            ("sort", self.sort),
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
        ]


class SubCategoriesEndpoint(BaseEndpoint):
    kind: Literal[RequestType.SUB_CATEGORIES] = RequestType.SUB_CATEGORIES
    category: str
    media: MediaType
    offset: int
    limit: int
    sort: str

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/categories/{_segment(self.category)}"

    def query(self) -> QueryItems:
        return [
            ("sort", self.sort),
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
        ]


class CategoryContentEndpoint(BaseEndpoint):
    kind: Literal[RequestType.CATEGORY_CONTENT] = RequestType.CATEGORY_CONTENT
    category: str
    media: MediaType
    offset: int
    limit: int
    rating: RatingType
    lang: LanguageType

    @property
    def media_type(self) -> MediaType:
        return self.media

    def path(self) -> str:
        return f"{self.media.path_segment}/categories/{_segment(self.category)}"

    def query(self) -> QueryItems:
        return [
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
            ("rating", self.rating.value),
            ("lang", self.lang.value),
        ]


Endpoint = Annotated[
    Union[
        SearchEndpoint,
        TrendingEndpoint,
        TranslateEndpoint,
        RandomEndpoint,
        GetEndpoint,
        GetAllEndpoint,
        TermSuggestionsEndpoint,
        CategoriesEndpoint,
        SubCategoriesEndpoint,
        CategoryContentEndpoint,
    ],
    Field(discriminator="kind"),
]

ENDPOINT_TYPES: dict[RequestType, type[BaseEndpoint]] = {
    RequestType.SEARCH: SearchEndpoint,
    RequestType.TRENDING: TrendingEndpoint,
    RequestType.TRANSLATE: TranslateEndpoint,
    RequestType.RANDOM: RandomEndpoint,
    RequestType.GET: GetEndpoint,
    RequestType.GET_ALL: GetAllEndpoint,
    RequestType.TERM_SUGGESTIONS: TermSuggestionsEndpoint,
    RequestType.CATEGORIES: CategoriesEndpoint,
    RequestType.SUB_CATEGORIES: SubCategoriesEndpoint,
    RequestType.CATEGORY_CONTENT: CategoryContentEndpoint,
}


def route(endpoint: BaseEndpoint) -> tuple[HTTPMethod, str, QueryItems]:
    return endpoint.method, endpoint.path(), endpoint.query()


def build_request(endpoint: BaseEndpoint, api_key: str, base_url: str = BASE_URL) -> RequestSpec:
    method, path, query = route(endpoint)
    query_items: QueryItems = [("api_key", api_key), *query]
    url = f"{base_url.rstrip('/')}/{path}?{urlencode(query_items, quote_via=quote)}"
    return RequestSpec(
        method=method,
        url=url,
        headers={"content-type": "application/json"},
        body=None,
    )
