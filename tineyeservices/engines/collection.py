from __future__ import annotations

from typing import Sequence

from tineyeservices.client.models import ServiceResponse
from tineyeservices.engines.base import EngineBase, add_indexed, service_operation


class CollectionOperations(EngineBase):
    """Calls every TinEye Services API supports: delete, count, list and ping."""

    @service_operation
    def delete(self, filepaths: Sequence[str]) -> ServiceResponse:
        """Delete images from the collection by their collection filepaths."""

        builder = self._message()
        add_indexed(builder, "filepaths", filepaths)
        return self._post("delete", builder)

    @service_operation
    def count(self) -> ServiceResponse:
        """Number of images in the collection, as `result[0]`."""

        return self._get("count")

    @service_operation
    def list(self, offset: int = 0, limit: int = 20) -> ServiceResponse:
        """Collection filepaths, `limit` at a time starting at `offset`."""

        return self._get("list", {"offset": offset, "limit": limit})

    @service_operation
    def ping(self) -> ServiceResponse:
        return self._get("ping")
