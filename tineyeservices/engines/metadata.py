from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from tineyeservices.client.models import ServiceResponse
from tineyeservices.client.multipart import HttpMessageBuilder
from tineyeservices.core.image import Image
from tineyeservices.engines.base import EngineBase, add_indexed, service_operation
from tineyeservices.errors import ErrorKind, TinEyeServiceError
from tineyeservices.utils.json_safe import dumps_field

Metadata = Mapping[str, Any]


class MetadataOperations(EngineBase):
    """Calls of APIs that store a metadata document with each image."""

    @service_operation
    def add_image(
        self,
        images: Sequence[Image],
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
    ) -> ServiceResponse:
        builder = self._message()
        for i, image in enumerate(images):
            builder.add(f"images[{i}]", image)
            if image.collection_filepath is not None:
                builder.add(f"filepaths[{i}]", image.collection_filepath)
            if image.metadata is not None:
                builder.add(f"metadata[{i}]", json_field(image.metadata))
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._post("add", builder)

    @service_operation
    def add_url(
        self,
        images: Sequence[Image],
        ignore_background: bool = True,
        ignore_interior_background: bool = True,
    ) -> ServiceResponse:
        builder = self._message()
        for i, image in enumerate(images):
            builder.add(f"urls[{i}]", image.url)  # type: ignore[arg-type]
            builder.add(f"filepaths[{i}]", image.collection_filepath)  # type: ignore[arg-type]
            if image.metadata is not None:
                builder.add(f"metadata[{i}]", json_field(image.metadata))
        add_background_flags(builder, ignore_background, ignore_interior_background)
        return self._post("add", builder)

    @service_operation
    def get_metadata(self, filepaths: Sequence[str]) -> ServiceResponse:
        builder = self._message()
        add_indexed(builder, "filepaths", filepaths)
        return self._post("get_metadata", builder)

    @service_operation
    def get_search_metadata(self) -> ServiceResponse:
        """Metadata keys that can be searched on, with their types."""

        return self._get("get_search_metadata")

    @service_operation
    def get_return_metadata(self) -> ServiceResponse:
        """Metadata keys that can be returned with search results."""

        return self._get("get_return_metadata")

    @service_operation
    def update_metadata(
        self, filepaths: Sequence[str], metadata: Sequence[Metadata]
    ) -> ServiceResponse:
        """Replace the metadata of collection images, pairwise."""

        if len(filepaths) != len(metadata):
            raise TinEyeServiceError(
                ErrorKind.CONSTRUCTION,
                "filepaths and metadata list must have the same number of entries",
            )
        builder = self._message()
        for i, (filepath, doc) in enumerate(zip(filepaths, metadata)):
            builder.add(f"filepaths[{i}]", filepath)
            builder.add(f"metadata[{i}]", json_field(doc))
        return self._post("update_metadata", builder)


def add_search_options(
    builder: HttpMessageBuilder,
    metadata: Optional[Metadata],
    return_metadata: Optional[Sequence[str]],
    sort_metadata: bool,
    min_score: int,
    offset: int,
    limit: int,
) -> None:
    # return/sort options are only sent alongside a metadata query
    if metadata is not None:
        builder.add("metadata", json_field(metadata))
        if return_metadata is not None:
            builder.add("return_metadata", json_field(list(return_metadata)))
        builder.add("sort_metadata", sort_metadata)
    builder.add("min_score", min_score)
    builder.add("offset", offset)
    builder.add("limit", limit)


def add_background_flags(
    builder: HttpMessageBuilder, ignore_background: bool, ignore_interior_background: bool
) -> None:
    builder.add("ignore_background", ignore_background)
    builder.add("ignore_interior_background", ignore_interior_background)


def json_field(value: Any) -> str:
    """JSON text of a metadata document, as a CONSTRUCTION error if it cannot be encoded."""

    try:
        return dumps_field(value)
    except (TypeError, ValueError) as e:
        raise TinEyeServiceError(
            ErrorKind.CONSTRUCTION, "metadata is not JSON serializable", cause=e
        ) from e
