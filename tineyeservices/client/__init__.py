"""HTTP plumbing for talking to TinEye Services APIs.

Security notes:
- Treat server responses as untrusted input.
- Avoid printing or logging credentials or raw image bytes.
"""

from .http import HttpResponse, HttpTransport
from .models import ServiceResponse
from .multipart import HttpMessageBuilder
from .request import ServiceRequest

__all__ = [
    "HttpMessageBuilder",
    "HttpResponse",
    "HttpTransport",
    "ServiceRequest",
    "ServiceResponse",
]
