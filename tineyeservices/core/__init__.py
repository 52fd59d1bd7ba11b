from .colors import Color, coerce_colors
from .image import DEFAULT_MAX_IMAGE_BYTES, Image

__all__ = ["Color", "DEFAULT_MAX_IMAGE_BYTES", "Image", "coerce_colors"]
