from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Where in a service call a failure happened."""

    CONSTRUCTION = "construction"
    BUILD = "build"
    TRANSPORT = "transport"
    PARSE = "parse"


class TinEyeServiceError(Exception):
    """
    The one exception raised by this package.

    `kind` tells callers what failed:
    - CONSTRUCTION: a missing or invalid argument (base URL, method, image path)
    - BUILD: the multipart POST body could not be serialized
    - TRANSPORT: the HTTP call failed (connection, timeout, non-2xx status)
    - PARSE: the response body is not a valid JSON service response

    The original exception, if any, is kept in `cause` and chained as `__cause__`.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.cause = cause
        self.status_code = status_code
        if cause is not None:
            self.__cause__ = cause

    @property
    def request_failed(self) -> bool:
        return self.kind is ErrorKind.TRANSPORT

    @property
    def response_unparsable(self) -> bool:
        return self.kind is ErrorKind.PARSE

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.message}"
        if self.status_code is not None:
            text += f" (HTTP {self.status_code})"
        if self.cause is not None:
            text += f": {self.cause}"
        return text

    def __repr__(self) -> str:
        return f"TinEyeServiceError(kind={self.kind.value!r}, message={self.message!r})"
