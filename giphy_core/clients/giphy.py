from __future__ import annotations

import asyncio
from typing import Any, Callable, Sequence

import httpx

from giphy_core.clients.request import GiphyRequest, JSONObject
from giphy_core.clients.router import (
    BaseEndpoint,
    CategoriesEndpoint,
    CategoryContentEndpoint,
    GetAllEndpoint,
    GetEndpoint,
    RandomEndpoint,
    SearchEndpoint,
    SubCategoriesEndpoint,
    TermSuggestionsEndpoint,
    TranslateEndpoint,
    TrendingEndpoint,
    build_request,
)
from giphy_core.core.config import GiphyConfig, get_client_config
from giphy_core.core.errors import ConfigurationError, GiphyError, RequestCancelledError
from giphy_core.mapping.responses import mapper_for
from giphy_core.observability.logging import get_logger
from giphy_core.schemas.enums import LanguageType, MediaType, RatingType, RenditionType
from giphy_core.schemas.responses import GiphyResponse

logger = get_logger(__name__)

Completion = Callable[[Any, GiphyError | None], None]


class GiphyClient:
    """Async client for the read-only GIPHY v1 API.

    Operation methods start the request right away and return the
    ``GiphyRequest``; they need a running event loop. ``completion`` receives
    ``(response, None)`` or ``(None, error)``. Use ``fetch`` to await the typed
    response instead.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        session: httpx.AsyncClient | None = None,
        config: GiphyConfig | None = None,
    ) -> None:
        if config is None and (api_key is None or base_url is None or timeout_seconds is None):
            config = get_client_config()
        config = config or GiphyConfig()

        resolved_key = api_key or config.api_key
        if not resolved_key:
            raise ConfigurationError("GIPHY API key is missing; pass api_key or set GIPHY_API_KEY")

        self.api_key = resolved_key
        self.base_url = base_url or config.base_url
        self._timeout = httpx.Timeout(timeout_seconds if timeout_seconds is not None else config.timeout_seconds)
        self._owns_session = session is None
        self.session = session or httpx.AsyncClient(timeout=self._timeout)
        self._in_flight: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> GiphyClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session:
            await self.session.aclose()

    def request(
        self,
        endpoint: BaseEndpoint,
        completion: Completion | None = None,
        *,
        rendition: RenditionType = RenditionType.ORIGINAL,
    ) -> GiphyRequest:
        mapper = mapper_for(endpoint.kind)

        def on_json(payload: JSONObject | None, response: httpx.Response | None, error: GiphyError | None) -> None:
            if completion is None:
                return
            if error is not None or payload is None:
                completion(None, error)
                return
            obj, map_error = mapper(None, payload, endpoint.kind, endpoint.media_type, rendition)
            if map_error is not None:
                logger.debug("giphy.mapping.failed", extra={"request_type": endpoint.kind.value})
            completion(obj, map_error)

        spec = build_request(endpoint, self.api_key, self.base_url)
        request = GiphyRequest(self.session, spec, endpoint.kind, on_json)
        task = request.start()
        if task is not None:
            # The loop only keeps weak references to tasks.
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
        return request

    async def fetch(
        self,
        endpoint: BaseEndpoint,
        *,
        rendition: RenditionType = RenditionType.ORIGINAL,
    ) -> GiphyResponse:
        future: asyncio.Future[GiphyResponse] = asyncio.get_running_loop().create_future()

        def deliver(obj: Any, error: GiphyError | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(obj)

        request = self.request(endpoint, deliver, rendition=rendition)
        try:
            await request.wait()
        except asyncio.CancelledError:
            request.cancel()
            if future.done():
                future.exception()
            else:
                future.cancel()
            raise

        if not future.done():
            raise RequestCancelledError(f"Request {request.request_id} was cancelled")
        return future.result()

    def search(
        self,
        query: str,
        *,
        media: MediaType = MediaType.GIF,
        offset: int = 0,
        limit: int = 25,
        rating: RatingType = RatingType.RATED_R,
        lang: LanguageType = LanguageType.ENGLISH,
        completion: Completion | None = None,
    ) -> GiphyRequest:
        endpoint = SearchEndpoint(query=query, media=media, offset=offset, limit=limit, rating=rating, lang=lang)
        return self.request(endpoint, completion)

    def trending(
        self,
        *,
        media: MediaType = MediaType.GIF,
        offset: int = 0,
        limit: int = 25,
        rating: RatingType = RatingType.RATED_R,
        completion: Completion | None = None,
    ) -> GiphyRequest:
        return self.request(TrendingEndpoint(media=media, offset=offset, limit=limit, rating=rating), completion)

    def translate(
        self,
        term: str,
        *,
        media: MediaType = MediaType.GIF,
        rating: RatingType = RatingType.RATED_R,
        lang: LanguageType = LanguageType.ENGLISH,
        completion: Completion | None = None,
    ) -> GiphyRequest:
        return self.request(TranslateEndpoint(term=term, media=media, rating=rating, lang=lang), completion)

    def random(
        self,
        tag: str,
        *,
        media: MediaType = MediaType.GIF,
        rating: RatingType = RatingType.RATED_R,
        completion: Completion | None = None,
    ) -> GiphyRequest:
        return self.request(RandomEndpoint(tag=tag, media=media, rating=rating), completion)

    def gif_by_id(self, gif_id: str, *, completion: Completion | None = None) -> GiphyRequest:
        return self.request(GetEndpoint(id=gif_id), completion)

    def gifs_by_ids(self, ids: Sequence[str], *, completion: Completion | None = None) -> GiphyRequest:
        return self.request(GetAllEndpoint(ids=tuple(ids)), completion)

    def term_suggestions(self, term: str, *, completion: Completion | None = None) -> GiphyRequest:
        return self.request(TermSuggestionsEndpoint(term=term), completion)

    def categories(
        self,
        *,
        media: MediaType = MediaType.GIF,
        offset: int = 0,
        limit: int = 25,
        sort: str = "",
        completion: Completion | None = None,
    ) -> GiphyRequest:
        return self.request(CategoriesEndpoint(media=media, offset=offset, limit=limit, sort=sort), completion)

    def subcategories(
        self,
        category: str,
        *,
        media: MediaType = MediaType.GIF,
        offset: int = 0,
        limit: int = 25,
        sort: str = "",
        completion: Completion | None = None,
    ) -> GiphyRequest:
        endpoint = SubCategoriesEndpoint(category=category, media=media, offset=offset, limit=limit, sort=sort)
        return self.request(endpoint, completion)

    def category_content(
        self,
        category: str,
        *,
        media: MediaType = MediaType.GIF,
        offset: int = 0,
        limit: int = 25,
        rating: RatingType = RatingType.RATED_R,
        lang: LanguageType = LanguageType.ENGLISH,
        completion: Completion | None = None,
    ) -> GiphyRequest:
        endpoint = CategoryContentEndpoint(
            category=category, media=media, offset=offset, limit=limit, rating=rating, lang=lang
        )
        return self.request(endpoint, completion)
