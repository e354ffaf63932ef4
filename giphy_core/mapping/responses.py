from __future__ import annotations

from typing import Any, Callable

from giphy_core.core.errors import MappingError
from giphy_core.mapping import objects
from giphy_core.mapping.objects import MapResult
from giphy_core.schemas.enums import MediaType, RenditionType, RequestType
from giphy_core.schemas.responses import (
    GiphyResponse,
    ListCategoryResponse,
    ListMediaResponse,
    ListTermSuggestionResponse,
    MediaResponse,
    Meta,
    Pagination,
)

ItemMapper = Callable[..., tuple[Any, MappingError | None]]
ResponseMapper = Callable[..., tuple[GiphyResponse | None, MappingError | None]]


def _map_envelope_meta(
    name: str,
    data: dict[str, Any],
    request: RequestType,
    media: MediaType,
    rendition: RenditionType,
) -> MapResult[Meta]:
    meta_data = data.get("meta")
    if not isinstance(meta_data, dict):
        return None, MappingError(f"Couldn't map {name} due to Meta missing for {data}")

    meta, error = objects.map_meta(None, meta_data, request, media, rendition)
    if meta is not None:
        return meta, None
    if error is None:
        return None, MappingError(f"Couldn't map {name}: meta mapping returned neither an object nor an error")
    return None, error


def _map_pagination(
    name: str,
    data: dict[str, Any],
    request: RequestType,
    media: MediaType,
    rendition: RenditionType,
) -> MapResult[Pagination]:
    pagination, error = objects.map_pagination(None, data["pagination"], request, media, rendition)
    if pagination is None:
        return None, error or MappingError(f"Unexpected pagination error mapping {name}")
    return pagination, None


def _map_items(
    name: str,
    item_mapper: ItemMapper,
    data: dict[str, Any],
    request: RequestType,
    media: MediaType,
    rendition: RenditionType,
) -> MapResult[list[Any]]:
    raw_items = data["data"]
    if not isinstance(raw_items, list):
        return None, MappingError(f"Couldn't map {name}: data must be a list for {data}")

    results: list[Any] = []
    for raw_item in raw_items:
        item, error = item_mapper(None, raw_item, request, media, rendition)
        if item is None:
            # First failure wins; no partial lists.
            return None, error or MappingError(f"Unexpected data error mapping {name}")
        results.append(item)
    return results, None


def _ensure_object(name: str, data: Any) -> MappingError | None:
    if isinstance(data, dict):
        return None
    return MappingError(f"Couldn't map {name}: expected a JSON object, got {data!r}")


def map_media_response(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[MediaResponse]:
    name = MediaResponse.__name__
    error = _ensure_object(name, data)
    if error is not None:
        return None, error

    meta, error = _map_envelope_meta(name, data, request, media, rendition)
    if meta is None:
        return None, error

    raw_media = data.get("data")
    # /random answers an unmatched tag with "data": []
    if raw_media is None or raw_media == []:
        return MediaResponse(meta=meta, data=None), None

    item, error = objects.map_media(None, raw_media, request, media, rendition)
    if item is None:
        return None, error
    return MediaResponse(meta=meta, data=item), None


def map_list_media_response(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[ListMediaResponse]:
    name = ListMediaResponse.__name__
    error = _ensure_object(name, data)
    if error is not None:
        return None, error

    meta, error = _map_envelope_meta(name, data, request, media, rendition)
    if meta is None:
        return None, error

    pagination: Pagination | None = None
    if data.get("pagination") is not None:
        pagination, error = _map_pagination(name, data, request, media, rendition)
        if pagination is None:
            return None, error

    items: list[Any] | None = None
    if data.get("data") is not None:
        items, error = _map_items(name, objects.map_media, data, request, media, rendition)
        if items is None:
            return None, error

    return ListMediaResponse(meta=meta, data=items, pagination=pagination), None


def map_list_term_suggestion_response(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[ListTermSuggestionResponse]:
    name = ListTermSuggestionResponse.__name__
    error = _ensure_object(name, data)
    if error is not None:
        return None, error

    meta, error = _map_envelope_meta(name, data, request, media, rendition)
    if meta is None:
        return None, error

    items: list[Any] | None = None
    if data.get("data") is not None:
        items, error = _map_items(name, objects.map_term_suggestion, data, request, media, rendition)
        if items is None:
            return None, error

    return ListTermSuggestionResponse(meta=meta, data=items), None


def map_list_category_response(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[ListCategoryResponse]:
    name = ListCategoryResponse.__name__
    error = _ensure_object(name, data)
    if error is not None:
        return None, error

    meta, error = _map_envelope_meta(name, data, request, media, rendition)
    if meta is None:
        return None, error

    pagination: Pagination | None = None
    if data.get("pagination") is not None:
        pagination, error = _map_pagination(name, data, request, media, rendition)
        if pagination is None:
            return None, error

    items: list[Any] | None = None
    if data.get("data") is not None:
        items, error = _map_items(name, objects.map_category, data, request, media, rendition)
        if items is None:
            return None, error

    return ListCategoryResponse(meta=meta, data=items, pagination=pagination), None


_RESPONSE_MAPPERS: dict[RequestType, ResponseMapper] = {
    RequestType.SEARCH: map_list_media_response,
    RequestType.TRENDING: map_list_media_response,
    RequestType.TRANSLATE: map_media_response,
    RequestType.RANDOM: map_media_response,
    RequestType.GET: map_media_response,
    RequestType.GET_ALL: map_list_media_response,
    RequestType.TERM_SUGGESTIONS: map_list_term_suggestion_response,
    RequestType.CATEGORIES: map_list_category_response,
    RequestType.SUB_CATEGORIES: map_list_category_response,
    RequestType.CATEGORY_CONTENT: map_list_media_response,
}


def mapper_for(request: RequestType) -> ResponseMapper:
    return _RESPONSE_MAPPERS[request]
