from __future__ import annotations

import json
import logging
from typing import Callable, Mapping, Optional, Union
from urllib.parse import urlencode

from pydantic import ValidationError

from tineyeservices.client.http import HttpTransport
from tineyeservices.client.models import ServiceResponse
from tineyeservices.client.multipart import HttpMessageBuilder
from tineyeservices.errors import ErrorKind, TinEyeServiceError

TransportFactory = Callable[..., HttpTransport]
QueryParams = Union[str, Mapping[str, object]]


class ServiceRequest:
    """Round trips to one TinEye Services API.

    `api_url` is the REST root of the API (for example
    `https://acme.tineye.com/rest/`); a trailing slash is added if missing.
    Every call builds `{api_url}{method}/`, makes a fresh transport, sends one
    request and parses the JSON reply into a ServiceResponse.

    Security notes:
    - Credentials are handed to the transport and never logged.
    - Response bodies are untrusted; only JSON decoding is applied.

    """

    def __init__(
        self,
        api_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        max_upload_bytes: Optional[int] = None,
        transport_factory: TransportFactory = HttpTransport,
        logger: Optional[logging.Logger] = None,
    ):
        self._log = logger or logging.getLogger("tineyeservices.client")

        if api_url is None or not str(api_url).strip():
            self._log.error("failed to construct ServiceRequest: api_url is missing")
            raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "api_url is required")

        api_url = str(api_url).strip()
        self.api_url = api_url if api_url.endswith("/") else api_url + "/"
        self.username = username
        self.password = password
        self.timeout = timeout
        self.max_upload_bytes = max_upload_bytes
        self._transport_factory = transport_factory

    def __repr__(self) -> str:
        return f"ServiceRequest(api_url={self.api_url!r})"

    def method_url(self, method: str) -> str:
        if method is None or not str(method).strip():
            self._log.error("API request failed: method is missing")
            raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "method is required")
        return f"{self.api_url}{str(method).strip()}/"

    def get_api_request(
        self, method: str, query_params: Optional[QueryParams] = None
    ) -> ServiceResponse:
        """GET `{api_url}{method}/`, with `?query_params` when given."""

        url = self.method_url(method)
        query = _format_query(query_params)
        if query:
            url += "?" + query

        text = self._call(lambda: self._transport().get(url), "GET", method)
        return self._parse(text, "GET", method)

    def post_api_request(self, method: str, body: bytes, boundary: str) -> ServiceResponse:
        """POST a prebuilt multipart body to `{api_url}{method}/`."""

        url = self.method_url(method)
        if body is None or not boundary:
            self._log.error("POST request to %s failed: body and boundary are required", method)
            raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "body and boundary are required")
        if not isinstance(body, (bytes, bytearray)):
            self._log.error("POST request to %s failed: body must be bytes", method)
            raise TinEyeServiceError(
                ErrorKind.CONSTRUCTION, f"body must be bytes, not {type(body).__name__}"
            )
        if self.max_upload_bytes is not None and len(body) > self.max_upload_bytes:
            self._log.error("POST request to %s refused: body exceeds upload cap", method)
            raise TinEyeServiceError(
                ErrorKind.BUILD,
                f"POST body too large for upload cap: {len(body)} > {self.max_upload_bytes}",
            )

        text = self._call(lambda: self._transport().post(url, body, boundary), "POST", method)
        return self._parse(text, "POST", method)

    def post_message(self, method: str, builder: HttpMessageBuilder) -> ServiceResponse:
        """Serialize `builder` and POST it."""

        return self.post_api_request(method, builder.to_bytes(), builder.boundary)

    def _transport(self) -> HttpTransport:
        return self._transport_factory(
            self.username, self.password, timeout=self.timeout, logger=self._log
        )

    def _call(self, send: Callable[[], str], verb: str, method: str) -> str:
        try:
            return send()
        except TinEyeServiceError as e:
            self._log.error("%s request to API failed for %s: %s", verb, method, e)
            raise

    def _parse(self, text: str, verb: str, method: str) -> ServiceResponse:
        try:
            document = json.loads(text)
            return ServiceResponse.from_document(document)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, TypeError) as e:
            self._log.error("failed to parse %s API response for %s", verb, method, exc_info=True)
            raise TinEyeServiceError(
                ErrorKind.PARSE, f"failed to parse {verb} API response for {method}", cause=e
            ) from e


def _format_query(query_params: Optional[QueryParams]) -> str:
    if query_params is None:
        return ""
    if isinstance(query_params, str):
        return query_params.lstrip("?")
    return urlencode([(k, _query_value(v)) for k, v in query_params.items()])


def _query_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
