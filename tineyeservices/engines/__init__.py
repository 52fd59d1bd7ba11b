"""Clients for the TinEye Services APIs.

Each engine embeds a ServiceRequest (`engine.request`) and is assembled from
operation groups:

- MatchEngineRequest, MobileEngineRequest, WineEngineRequest:
  collection + match operations
- MulticolorEngineRequest: collection + metadata + color operations
"""

from .base import EngineBase
from .collection import CollectionOperations
from .match import MatchEngineRequest, MatchOperations, MobileEngineRequest, WineEngineRequest
from .metadata import MetadataOperations
from .multicolor import ColorOperations, MulticolorEngineRequest

__all__ = [
    "CollectionOperations",
    "ColorOperations",
    "EngineBase",
    "MatchEngineRequest",
    "MatchOperations",
    "MetadataOperations",
    "MobileEngineRequest",
    "MulticolorEngineRequest",
    "WineEngineRequest",
]
