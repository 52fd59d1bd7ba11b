from __future__ import annotations

import base64
import logging
import ssl
from dataclasses import dataclass
from email.message import Message
from http.client import HTTPException
from typing import Dict, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from tineyeservices.errors import ErrorKind, TinEyeServiceError


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """HTTP response wrapper.

    Security notes:
    - Treat `body_bytes` as untrusted.

    """

    status: int
    headers: Mapping[str, str]
    body_bytes: bytes

    def text(self) -> str:
        """Decode the body using the Content-Type charset, UTF-8 if absent.

        Raises UnicodeDecodeError on bytes that are invalid in that charset.
        """

        charset = _charset(self.headers) or "utf-8"
        try:
            return self.body_bytes.decode(charset, errors="strict")
        except LookupError:
            return self.body_bytes.decode("utf-8", errors="strict")


class HttpTransport:
    """Issue one blocking GET or multipart POST and return the body as text.

    One transport is made per request. Keep-alive is turned off, nothing is
    retried and no cookies or connections are kept between calls.

    Security notes:
    - Basic auth is sent only when both username and password are set.
    - Uses the default SSL context; TLS verification is never disabled.
    - Never logs credentials or request bodies.

    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.username = username
        self.password = password
        self.timeout = timeout
        self._log = logger or logging.getLogger("tineyeservices.client")

    def post(self, url: str, body: bytes, boundary: str) -> str:
        """HTTP POST a multipart/form-data body."""

        headers = {
            "Content-Type": f"multipart/form-data; boundary={boundary}",
            "Content-Length": str(len(body)),
        }
        return self._send("POST", url, bytes(body), headers)

    def get(self, url: str) -> str:
        """HTTP GET."""

        return self._send("GET", url, None, {})

    def _send(self, method: str, url: str, data: Optional[bytes], headers: Dict[str, str]) -> str:
        headers = dict(headers)
        headers["Connection"] = "close"
        if self.username is not None and self.password is not None:
            headers["Authorization"] = _basic_auth(self.username, self.password)

        try:
            req = Request(url=url, data=data, headers=headers, method=method)
            resp = _do_request(req, self.timeout)
        except ValueError as e:
            # urllib rejects malformed URLs while building the Request.
            self._log.error("%s %s failed: invalid url", method, url)
            raise TinEyeServiceError(ErrorKind.TRANSPORT, f"{method} failed", cause=e) from e
        except TinEyeServiceError as e:
            self._log.error("%s %s failed: %s", method, url, e)
            raise
        self._log.debug("%s %s -> %s", method, url, resp.status)
        try:
            return resp.text()
        except UnicodeDecodeError as e:
            self._log.error("%s %s failed: response body is not decodable", method, url)
            raise TinEyeServiceError(
                ErrorKind.PARSE, f"{method} response body is not decodable", cause=e
            ) from e


def _basic_auth(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _charset(headers: Mapping[str, str]) -> Optional[str]:
    ctype = None
    for k, v in headers.items():
        if k.lower() == "content-type":
            ctype = v
            break
    if not ctype:
        return None
    msg = Message()
    msg["content-type"] = ctype
    return msg.get_content_charset()


def _do_request(req: Request, timeout: Optional[float]) -> HttpResponse:
    """Execute a request, mapping every failure to a TRANSPORT error.

    Security notes:
    - Uses default SSL context (verification ON).
    """

    kwargs = {}
    if timeout is not None:
        kwargs["timeout"] = timeout
    if req.full_url.lower().startswith("https:"):
        kwargs["context"] = ssl.create_default_context()

    method = req.get_method()
    try:
        with urlopen(req, **kwargs) as resp:
            body = resp.read()
            headers = {k: v for k, v in resp.headers.items()}
            return HttpResponse(status=int(resp.status), headers=headers, body_bytes=body)
    except HTTPError as e:
        raise TinEyeServiceError(
            ErrorKind.TRANSPORT, f"{method} failed", cause=e, status_code=int(e.code or 0)
        ) from e
    except (URLError, HTTPException, OSError, ValueError) as e:
        raise TinEyeServiceError(ErrorKind.TRANSPORT, f"{method} failed", cause=e) from e
