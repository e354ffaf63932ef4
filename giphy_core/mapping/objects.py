"""Mappers for the objects nested inside a GIPHY response.

Every mapper has the same shape::

    map_x(root, data, request, media, rendition) -> (object, None) | (None, MappingError)

``root`` is the object the JSON is nested under (``None`` at the top level) and
only feeds error descriptions. Nested failures are returned as the same
``MappingError`` instance, never re-wrapped.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from giphy_core.core.errors import MappingError
from giphy_core.schemas.enums import MediaType, RenditionType, RequestType
from giphy_core.schemas.media import Category, Media, TermSuggestion
from giphy_core.schemas.responses import Meta, Pagination

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)

MapResult = tuple[T | None, MappingError | None]


def _context(root: Any) -> str:
    if root is None:
        return ""
    return f" (in {root})"


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{field}: {first.get('msg')}"


def validate_object(model: type[ModelT], root: Any, data: Any) -> MapResult[ModelT]:
    name = model.__name__
    if not isinstance(data, dict):
        return None, MappingError(f"Couldn't map {name}{_context(root)}: expected a JSON object, got {data!r}")
    try:
        return model.model_validate(data), None
    except ValidationError as exc:
        return None, MappingError(
            f"Couldn't map {name}{_context(root)} due to {_describe_validation_error(exc)} for {data}"
        )


def map_meta(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[Meta]:
    return validate_object(Meta, root, data)


def map_pagination(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[Pagination]:
    return validate_object(Pagination, root, data)


def map_media(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[Media]:
    obj, error = validate_object(Media, root, data)
    if obj is None:
        return None, error
    return obj.model_copy(update={"media_type": media, "rendition": rendition}), None


def map_term_suggestion(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[TermSuggestion]:
    return validate_object(TermSuggestion, root, data)


def map_category(
    root: Any,
    data: Any,
    request: RequestType,
    media: MediaType = MediaType.GIF,
    rendition: RenditionType = RenditionType.ORIGINAL,
) -> MapResult[Category]:
    if not isinstance(data, dict):
        return validate_object(Category, root, data)

    scalars = {key: value for key, value in data.items() if key not in ("gif", "subcategories")}
    category, error = validate_object(Category, root, scalars)
    if category is None:
        return None, error

    gif: Media | None = None
    if data.get("gif") is not None:
        gif, error = map_media(category, data["gif"], request, media, rendition)
        if gif is None:
            return None, error

    subcategories: list[Category] = []
    raw_subcategories = data.get("subcategories")
    if raw_subcategories is not None:
        if not isinstance(raw_subcategories, list):
            return None, MappingError(
                f"Couldn't map Category{_context(root)}: subcategories must be a list for {data}"
            )
        for entry in raw_subcategories:
            subcategory, error = map_category(category, entry, request, media, rendition)
            if subcategory is None:
                return None, error
            subcategories.append(subcategory)

    return category.model_copy(update={"gif": gif, "subcategories": subcategories}), None
