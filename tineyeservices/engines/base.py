from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from tineyeservices.client.http import HttpTransport
from tineyeservices.client.models import ServiceResponse
from tineyeservices.client.multipart import FieldValue, HttpMessageBuilder
from tineyeservices.client.request import QueryParams, ServiceRequest, TransportFactory
from tineyeservices.config import ClientConfig
from tineyeservices.errors import TinEyeServiceError

F = TypeVar("F", bound=Callable[..., Any])
E = TypeVar("E", bound="EngineBase")


def service_operation(func: F) -> F:
    """Log a failed API operation by name, then re-raise it unchanged."""

    name = func.__name__

    @functools.wraps(func)
    def wrapper(self: "EngineBase", *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except TinEyeServiceError as e:
            self._log.error("%s failed (%s)", name, e.kind.value)
            raise

    return wrapper  # type: ignore[return-value]


class EngineBase:
    """Shared wiring for every engine: an embedded ServiceRequest and a logger.

    Operation groups (collection, match, metadata, color) subclass this and
    use only `self.request` and `self._log`, so an engine is assembled by
    listing the groups it supports.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        max_upload_bytes: Optional[int] = None,
        request: Optional[ServiceRequest] = None,
        transport_factory: TransportFactory = HttpTransport,
        logger: Optional[logging.Logger] = None,
    ):
        self._log = logger or logging.getLogger("tineyeservices.engines")
        if request is None:
            request = ServiceRequest(
                api_url,  # type: ignore[arg-type]
                username,
                password,
                timeout=timeout,
                max_upload_bytes=max_upload_bytes,
                transport_factory=transport_factory,
                logger=self._log,
            )
        self.request = request

    @classmethod
    def from_config(cls: type[E], cfg: ClientConfig, *, logger: Optional[logging.Logger] = None) -> E:
        return cls(
            cfg.api_url,
            cfg.username,
            cfg.password,
            timeout=cfg.timeout_sec,
            max_upload_bytes=cfg.max_upload_bytes,
            logger=logger,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_url={self.request.api_url!r})"

    @property
    def api_url(self) -> str:
        return self.request.api_url

    def _message(self) -> HttpMessageBuilder:
        return HttpMessageBuilder(logger=self._log)

    def _post(self, method: str, builder: HttpMessageBuilder) -> ServiceResponse:
        return self.request.post_message(method, builder)

    def _get(self, method: str, query_params: Optional[QueryParams] = None) -> ServiceResponse:
        return self.request.get_api_request(method, query_params)


def add_indexed(builder: HttpMessageBuilder, key: str, values: Iterable[FieldValue]) -> None:
    """Add `key[0]`, `key[1]`, ... for each value."""

    for i, value in enumerate(values):
        builder.add(f"{key}[{i}]", value)
