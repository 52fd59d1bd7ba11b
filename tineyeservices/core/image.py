from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import InitVar, dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from tineyeservices.errors import ErrorKind, TinEyeServiceError

DEFAULT_MAX_IMAGE_BYTES = 25 * 1024 * 1024

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True, slots=True)
class Image:
    """An image to send to a TinEye Services API.

    An image is either a local file, whose bytes are read once when the Image
    is created, or a URL the service fetches itself. `collection_filepath` is
    the name the image gets in the remote collection when it is added, and
    `metadata` is an optional JSON object stored alongside it
    (MulticolorEngine only).

    Security notes:
    - Local files are read eagerly and bounded by `max_bytes` (None disables
      the cap).
    - URL images never touch the local filesystem.
    - Metadata is deep-copied so caller-held dicts cannot mutate the image.

    """

    filepath: Optional[str] = None
    url: Optional[str] = None
    collection_filepath: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    max_bytes: InitVar[Optional[int]] = DEFAULT_MAX_IMAGE_BYTES
    data: Optional[bytes] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self, max_bytes: Optional[int]) -> None:
        if (self.filepath is None) == (self.url is None):
            raise TinEyeServiceError(
                ErrorKind.CONSTRUCTION, "an Image needs exactly one of filepath or url"
            )

        if self.filepath is not None:
            path = os.fspath(self.filepath)
            if not isinstance(path, str) or not path.strip():
                raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "filepath must be non-empty")
            object.__setattr__(self, "filepath", path)
            try:
                data = _read_file_bounded(path, max_bytes)
            except (OSError, ValueError) as e:
                raise TinEyeServiceError(
                    ErrorKind.CONSTRUCTION, f"image {path} could not be read", cause=e
                ) from e
            object.__setattr__(self, "data", data)
        else:
            url = str(self.url).strip()
            if not url:
                raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "url must be non-empty")
            object.__setattr__(self, "url", url)

        if self.metadata is not None:
            if not isinstance(self.metadata, Mapping):
                raise TinEyeServiceError(
                    ErrorKind.CONSTRUCTION, "metadata must be a mapping (a JSON object)"
                )
            object.__setattr__(self, "metadata", deepcopy(dict(self.metadata)))

    @classmethod
    def from_file(
        cls,
        filepath: PathLike,
        collection_filepath: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        *,
        max_bytes: Optional[int] = DEFAULT_MAX_IMAGE_BYTES,
    ) -> "Image":
        return cls(
            filepath=os.fspath(filepath),
            collection_filepath=collection_filepath,
            metadata=metadata,
            max_bytes=max_bytes,
        )

    @classmethod
    def from_url(
        cls,
        url: str,
        collection_filepath: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "Image":
        return cls(url=url, collection_filepath=collection_filepath, metadata=metadata)

    @property
    def is_local(self) -> bool:
        return self.filepath is not None

    @property
    def filename(self) -> Optional[str]:
        """Base name of the local file, None for URL images."""
        if self.filepath is None:
            return None
        return os.path.basename(self.filepath)


def _read_file_bounded(path: str, max_bytes: Optional[int]) -> bytes:
    """Read file bytes, refusing files larger than max_bytes."""

    if max_bytes is not None:
        st = os.stat(path)
        if st.st_size > max_bytes:
            raise ValueError(f"file too large for upload cap: {st.st_size} > {max_bytes}")
    with open(path, "rb") as f:
        data = f.read()
    if max_bytes is not None and len(data) > max_bytes:
        raise ValueError("file too large for upload cap")
    return data
