from __future__ import annotations

from typing import Sequence

from tineyeservices.client.models import ServiceResponse
from tineyeservices.client.multipart import HttpMessageBuilder
from tineyeservices.core.image import Image
from tineyeservices.engines.base import EngineBase, service_operation
from tineyeservices.engines.collection import CollectionOperations


class MatchOperations(EngineBase):
    """Add, search and compare calls of MatchEngine-style APIs.

    Search results carry a `score` per match; `min_score` drops weaker
    matches and `check_horizontal_flip` also matches mirrored images.
    """

    @service_operation
    def add_image(self, images: Sequence[Image]) -> ServiceResponse:
        """Upload local images to the collection.

        Each image is stored under its `collection_filepath` when it has one,
        under its file name otherwise.
        """

        builder = self._message()
        for i, image in enumerate(images):
            builder.add(f"images[{i}]", image)
            if image.collection_filepath is not None:
                builder.add(f"filepaths[{i}]", image.collection_filepath)
        return self._post("add", builder)

    @service_operation
    def add_url(self, images: Sequence[Image]) -> ServiceResponse:
        """Have the service fetch URL images; each needs a collection_filepath."""

        builder = self._message()
        for i, image in enumerate(images):
            builder.add(f"urls[{i}]", image.url)  # type: ignore[arg-type]
            builder.add(f"filepaths[{i}]", image.collection_filepath)  # type: ignore[arg-type]
        return self._post("add", builder)

    @service_operation
    def search_image(
        self,
        image: Image,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
        check_horizontal_flip: bool = False,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("image", image)
        return self._search(builder, min_score, offset, limit, check_horizontal_flip)

    @service_operation
    def search_filepath(
        self,
        filepath: str,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
        check_horizontal_flip: bool = False,
    ) -> ServiceResponse:
        """Search with an image that is already in the collection."""

        builder = self._message()
        builder.add("filepath", filepath)
        return self._search(builder, min_score, offset, limit, check_horizontal_flip)

    @service_operation
    def search_url(
        self,
        url: str,
        min_score: int = 0,
        offset: int = 0,
        limit: int = 100,
        check_horizontal_flip: bool = False,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("url", url)
        return self._search(builder, min_score, offset, limit, check_horizontal_flip)

    @service_operation
    def compare_image(
        self,
        image1: Image,
        image2: Image,
        min_score: int = 0,
        check_horizontal_flip: bool = False,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("image1", image1)
        builder.add("image2", image2)
        builder.add("min_score", min_score)
        builder.add("check_horizontal_flip", check_horizontal_flip)
        return self._post("compare", builder)

    @service_operation
    def compare_url(
        self,
        url1: str,
        url2: str,
        min_score: int = 0,
        check_horizontal_flip: bool = False,
    ) -> ServiceResponse:
        builder = self._message()
        builder.add("url1", url1)
        builder.add("url2", url2)
        builder.add("min_score", min_score)
        builder.add("check_horizontal_flip", check_horizontal_flip)
        return self._post("compare", builder)

    def _search(
        self,
        builder: HttpMessageBuilder,
        min_score: int,
        offset: int,
        limit: int,
        check_horizontal_flip: bool,
    ) -> ServiceResponse:
        builder.add("min_score", min_score)
        builder.add("offset", offset)
        builder.add("limit", limit)
        builder.add("check_horizontal_flip", check_horizontal_flip)
        return self._post("search", builder)


class MatchEngineRequest(CollectionOperations, MatchOperations):
    """Client for a MatchEngine API (image matching against a private collection).

    Usage:
        engine = MatchEngineRequest("https://acme.tineye.com/rest/", "user", "pass")
        engine.add_image([Image.from_file("logo.jpg", "logos/logo.jpg")])
        response = engine.search_image(Image.from_file("query.png"), limit=10)
        for match in response.result:
            print(match["filepath"], match["score"])
    """


class MobileEngineRequest(CollectionOperations, MatchOperations):
    """Client for a MobileEngine API; same calls as MatchEngine."""


class WineEngineRequest(CollectionOperations, MatchOperations):
    """Client for a WineEngine API; same calls as MatchEngine."""
