from __future__ import annotations

from typing import Optional, Sequence

from tineyeservices.client.models import ServiceResponse
from tineyeservices.client.multipart import HttpMessageBuilder
from tineyeservices.core.colors import (
    ColorLike,
    check_color_format,
    check_weights,
    coerce_colors,
)
from tineyeservices.core.image import Image
from tineyeservices.engines.base import EngineBase, add_indexed, service_operation
from tineyeservices.engines.collection import CollectionOperations
from tineyeservices.engines.metadata import (
    Metadata,
    MetadataOperations,
    add_background_flags,
    add_search_options,
    json_field,
)


class ColorOperations(EngineBase):
    """Color search, extraction and counting calls.

    Colors may be given as Color, `(r, g, b)` tuples or hex strings. Weights
    are optional; when given there must be one per color. `color_format`
    selects how extracted colors come back, `rgb` or `hex`.
    """

    # color_search

    @service_operation
    def search_image(
        self,
        image: Image,
        metadata: Optional[Metadata] = None,
        return_metadata: Optional[Sequence[str]] = None,
        sort_metadata: bool = False,
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("image", image)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._color_search(
            builder, metadata, return_metadata, sort_metadata, min_score, offset, limit
        )

    @service_operation
    def search_filepath(
        self,
        filepath: str,
        metadata: Optional[Metadata] = None,
        return_metadata: Optional[Sequence[str]] = None,
        sort_metadata: bool = False,
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("filepath", filepath)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._color_search(
            builder, metadata, return_metadata, sort_metadata, min_score, offset, limit
        )

    @service_operation
    def search_url(
        self,
        url: str,
        metadata: Optional[Metadata] = None,
        return_metadata: Optional[Sequence[str]] = None,
        sort_metadata: bool = False,
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("url", url)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._color_search(
            builder, metadata, return_metadata, sort_metadata, min_score, offset, limit
        )

    @service_operation
    def search_color(
        self,
        colors: Sequence[ColorLike],
        weights: Sequence[float] = (),
        metadata: Optional[Metadata] = None,
        return_metadata: Optional[Sequence[str]] = None,
        sort_metadata: bool = False,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
    ) -> ServiceResponse:
        builder = self._message()
        _add_colors(builder, "colors", colors, weights)
        return self._color_search(
            builder, metadata, return_metadata, sort_metadata, min_score, offset, limit
        )

    @service_operation
    def search_metadata(
        self,
        metadata: Metadata,
        return_metadata: Optional[Sequence[str]] = None,
        sort_metadata: bool = False,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
    ) -> ServiceResponse:
        builder = self._message()
        return self._color_search(
            builder, metadata, return_metadata, sort_metadata, min_score, offset, limit
        )

    # extract_image_colors

    @service_operation
    def extract_image_colors_image(
        self,
        images: Sequence[Image],
        limit: int = 32,
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
        color_format: str = "rgb",
    ) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "images", images)
        builder.add("limit", limit)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        builder.add("color_format", check_color_format(color_format))
        return self._post("extract_image_colors", builder)

    @service_operation
    def extract_image_colors_url(
        self,
        urls: Sequence[str],
        limit: int = 32,
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
        color_format: str = "rgb",
    ) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "urls", urls)
        builder.add("limit", limit)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        builder.add("color_format", check_color_format(color_format))
        return self._post("extract_image_colors", builder)

    # extract_collection_colors

    @service_operation
    def extract_collection_colors(self, limit: int = 32, color_format: str = "rgb") -> ServiceResponse:
        """Dominant colors of the whole collection."""

        builder = self._message()
        return self._extract_collection(builder, limit, color_format)

    @service_operation
    def extract_collection_colors_colors(
        self,
        colors: Sequence[ColorLike],
        weights: Sequence[float] = (),
        limit: int = 32,
        color_format: str = "rgb",
    ) -> ServiceResponse:
        """Dominant colors of the collection images that match `colors`."""

        builder = self._message()
        _add_colors(builder, "colors", colors, weights)
        return self._extract_collection(builder, limit, color_format)

    @service_operation
    def extract_collection_colors_filepath(
        self, filepaths: Sequence[str], limit: int = 32, color_format: str = "rgb"
    ) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "filepaths", filepaths)
        return self._extract_collection(builder, limit, color_format)

    @service_operation
    def extract_collection_colors_metadata(
        self, metadata: Optional[Metadata], limit: int = 32, color_format: str = "rgb"
    ) -> ServiceResponse:
        builder = self._message()
        if metadata is not None:
            builder.add("metadata", json_field(metadata))
        return self._extract_collection(builder, limit, color_format)

    # count_image_colors

    @service_operation
    def count_image_colors_image(
        self,
        images: Sequence[Image],
        count_colors: Sequence[ColorLike],
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
    ) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "images", images)
        _add_colors(builder, "count_colors", count_colors)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._post("count_image_colors", builder)

    @service_operation
    def count_image_colors_url(
        self,
        urls: Sequence[str],
        count_colors: Sequence[ColorLike],
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
    ) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "urls", urls)
        _add_colors(builder, "count_colors", count_colors)
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._post("count_image_colors", builder)

    # count_collection_colors

    @service_operation
    def count_collection_colors(self, count_colors: Sequence[ColorLike]) -> ServiceResponse:
        builder = self._message()
        _add_colors(builder, "count_colors", count_colors)
        return self._post("count_collection_colors", builder)

    @service_operation
    def count_collection_colors_filepath(
        self, filepaths: Sequence[str], count_colors: Sequence[ColorLike]
    ) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "filepaths", filepaths)
        _add_colors(builder, "count_colors", count_colors)
        return self._post("count_collection_colors", builder)

    @service_operation
    def count_collection_colors_colors(
        self,
        colors: Sequence[ColorLike],
        weights: Sequence[float],
        count_colors: Sequence[ColorLike],
    ) -> ServiceResponse:
        builder = self._message()
        _add_colors(builder, "colors", colors, weights)
        _add_colors(builder, "count_colors", count_colors)
        return self._post("count_collection_colors", builder)

    @service_operation
    def count_collection_colors_metadata(
        self, metadata: Optional[Metadata], count_colors: Sequence[ColorLike]
    ) -> ServiceResponse:
        builder = self._message()
        if metadata is not None:
            builder.add("metadata", json_field(metadata))
        _add_colors(builder, "count_colors", count_colors)
        return self._post("count_collection_colors", builder)

    # count_metadata

    @service_operation
    def count_metadata_collection(
        self, count_metadata: Sequence[Metadata], metadata: Optional[Metadata] = None
    ) -> ServiceResponse:
        builder = self._message()
        _add_count_metadata(builder, count_metadata)
        if metadata is not None:
            builder.add("metadata", json_field(metadata))
        return self._post("count_metadata", builder)

    @service_operation
    def count_metadata_colors(
        self,
        count_metadata: Sequence[Metadata],
        colors: Sequence[ColorLike],
        weights: Sequence[float] = (),
    ) -> ServiceResponse:
        builder = self._message()
        _add_count_metadata(builder, count_metadata)
        _add_colors(builder, "colors", colors, weights)
        return self._post("count_metadata", builder)

    @service_operation
    def count_metadata_filepaths(
        self, count_metadata: Sequence[Metadata], filepaths: Sequence[str]
    ) -> ServiceResponse:
        builder = self._message()
        _add_count_metadata(builder, count_metadata)
        add_indexed(builder, "filepaths", filepaths)
        return self._post("count_metadata", builder)

    def _color_search(
        self,
        builder: HttpMessageBuilder,
        metadata: Optional[Metadata],
        return_metadata: Optional[Sequence[str]],
        sort_metadata: bool,
        min_score: int,
        offset: int,
        limit: int,
    ) -> ServiceResponse:
        add_search_options(
            builder, metadata, return_metadata, sort_metadata, min_score, offset, limit
        )
        return self._post("color_search", builder)

    def _extract_collection(
        self, builder: HttpMessageBuilder, limit: int, color_format: str
    ) -> ServiceResponse:
        builder.add("limit", limit)
        builder.add("color_format", check_color_format(color_format))
        return self._post("extract_collection_colors", builder)


def _add_colors(
    builder: HttpMessageBuilder,
    key: str,
    colors: Sequence[ColorLike],
    weights: Sequence[float] = (),
) -> None:
    parsed = coerce_colors(colors)
    weights = list(weights or ())
    check_weights(parsed, weights)
    for i, color in enumerate(parsed):
        builder.add(f"{key}[{i}]", color.to_field())
        if weights:
            builder.add(f"weights[{i}]", weights[i])


def _add_count_metadata(builder: HttpMessageBuilder, count_metadata: Sequence[Metadata]) -> None:
    for i, doc in enumerate(count_metadata):
        builder.add(f"count_metadata[{i}]", json_field(doc))


class MulticolorEngineRequest(CollectionOperations, MetadataOperations, ColorOperations):
    """Client for a MulticolorEngine API (color search over a collection with metadata).

    Usage:
        engine = MulticolorEngineRequest("https://acme.tineye.com/rest/")
        engine.add_image([Image.from_file("dress.jpg", "dresses/1.jpg", {"brand": "acme"})])
        engine.search_color(["#ff0000", (0, 0, 255)], weights=[70, 30], limit=20)
        engine.extract_image_colors_url(["https://example.com/shoe.png"], color_format="hex")
    """
