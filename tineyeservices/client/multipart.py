from __future__ import annotations

import logging
import os
import uuid
from typing import Dict, List, Optional, Union

from tineyeservices.core.image import Image
from tineyeservices.errors import ErrorKind, TinEyeServiceError

FieldValue = Union[str, int, float, bool, Image]

CRLF = "\r\n"

_TEXT_FIELD = '--{boundary}\r\nContent-Disposition: form-data; name="{name}";\r\n\r\n{value}\r\n'
_IMAGE_HEADER = (
    '--{boundary}\r\nContent-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
    "Content-Type: image/{subtype}\r\n\r\n"
)


class HttpMessageBuilder:
    """Build one multipart/form-data POST body.

    Usage:
        builder = HttpMessageBuilder()
        builder.add("image", Image.from_file("photo.jpg"))
        builder.add("min_score", 0)
        builder.add("check_horizontal_flip", False)
        body = builder.to_bytes()

    A builder is made for a single request, filled, serialized once and
    dropped. Field names are unique across text fields and images.

    Security notes:
    - The whole body is held in memory; Image enforces a per-file size cap.
    - Image bytes are never logged.

    """

    def __init__(self, *, logger: Optional[logging.Logger] = None):
        self._fields: Dict[str, str] = {}
        self._images: Dict[str, Image] = {}
        self._boundary = "-" * 21 + uuid.uuid4().hex
        self._log = logger or logging.getLogger("tineyeservices.client")

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    def __contains__(self, name: object) -> bool:
        return name in self._fields or name in self._images

    def __len__(self) -> int:
        return len(self._fields) + len(self._images)

    def add(self, name: str, value: FieldValue) -> "HttpMessageBuilder":
        """Add a text field or an image part under `name`.

        bools are sent as `true`/`false`, numbers via str().
        """

        if not isinstance(name, str) or not name:
            raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "field name must be a non-empty string")
        if value is None:
            raise TinEyeServiceError(ErrorKind.CONSTRUCTION, f"value for field {name!r} is None")
        if name in self:
            raise TinEyeServiceError(ErrorKind.CONSTRUCTION, f"field {name!r} was already added")

        if isinstance(value, Image):
            self._images[name] = value
        else:
            self._fields[name] = _format_value(name, value)
        return self

    def to_bytes(self) -> bytes:
        """Serialize all fields, then all images, then the closing boundary."""

        try:
            parts: List[bytes] = [self._text_parts(), self._image_parts()]
            parts.append(f"--{self._boundary}--".encode("utf-8"))
            return b"".join(parts)
        except TinEyeServiceError as e:
            self._log.error("multipart build failed: %s", e)
            raise
        except Exception as e:
            self._log.error("multipart build failed", exc_info=True)
            raise TinEyeServiceError(ErrorKind.BUILD, "failed to build POST message", cause=e) from e

    # ToArray in other TinEye client libraries.
    to_array = to_bytes

    def _text_parts(self) -> bytes:
        out = []
        for name, value in self._fields.items():
            if self._boundary in value:
                raise TinEyeServiceError(
                    ErrorKind.BUILD, f"field {name!r} contains the message boundary"
                )
            out.append(_TEXT_FIELD.format(boundary=self._boundary, name=name, value=value))
        return "".join(out).encode("utf-8")

    def _image_parts(self) -> bytes:
        boundary_bytes = self._boundary.encode("utf-8")
        out: List[bytes] = []
        for name, image in self._images.items():
            if image.data is None or image.filepath is None:
                raise TinEyeServiceError(
                    ErrorKind.BUILD, f"image {name!r} has no local data (URL images go in text fields)"
                )
            if boundary_bytes in image.data:
                raise TinEyeServiceError(
                    ErrorKind.BUILD, f"image {name!r} contains the message boundary"
                )
            header = _IMAGE_HEADER.format(
                boundary=self._boundary,
                name=name,
                filename=os.path.basename(image.filepath),
                subtype=image_subtype(image.filepath),
            )
            out.append(header.encode("utf-8"))
            out.append(image.data)
            out.append(CRLF.encode("utf-8"))
        return b"".join(out)


def image_subtype(filepath: str) -> str:
    """MIME subtype for an image path: lower-cased extension, jpg -> jpeg."""

    ext = os.path.splitext(filepath)[1].lstrip(".").lower()
    if not ext:
        raise TinEyeServiceError(ErrorKind.BUILD, f"image {filepath!r} has no file extension")
    if ext == "jpg":
        return "jpeg"
    return ext


def _format_value(name: str, value: FieldValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TinEyeServiceError(
        ErrorKind.CONSTRUCTION,
        f"unsupported value type for field {name!r}: {type(value).__name__}",
    )
