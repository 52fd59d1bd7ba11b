"""Python client for the TinEye Services image-matching APIs.

Usage:
    from tineyeservices import Image, MatchEngineRequest, TinEyeServiceError

    engine = MatchEngineRequest("https://acme.tineye.com/rest/", "user", "pass")
    try:
        response = engine.search_image(Image.from_file("query.jpg"))
    except TinEyeServiceError as e:
        print(e.kind, e.cause)
"""

from .client import HttpMessageBuilder, HttpTransport, ServiceRequest, ServiceResponse
from .config import ClientConfig
from .core import Color, Image
from .engines import (
    MatchEngineRequest,
    MobileEngineRequest,
    MulticolorEngineRequest,
    WineEngineRequest,
)
from .errors import ErrorKind, TinEyeServiceError

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "Color",
    "ErrorKind",
    "HttpMessageBuilder",
    "HttpTransport",
    "Image",
    "MatchEngineRequest",
    "MobileEngineRequest",
    "MulticolorEngineRequest",
    "ServiceRequest",
    "ServiceResponse",
    "TinEyeServiceError",
    "WineEngineRequest",
]
