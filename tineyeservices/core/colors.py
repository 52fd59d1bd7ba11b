from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from tineyeservices.errors import ErrorKind, TinEyeServiceError

ColorLike = Union["Color", str, Tuple[int, int, int], Sequence[int]]

COLOR_FORMATS = frozenset({"rgb", "hex"})


@dataclass(frozen=True)
class Color:
    """
    An RGB color as used by MulticolorEngine color searches and counts.

    Invariants
    - each channel is an int in 0..255
    - immutable
    """

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{channel} must be an int")
            if not 0 <= value <= 255:
                raise ValueError(f"{channel} must be in 0..255, got {value}")

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(c * 2 for c in text)
        if len(text) != 6:
            raise ValueError(f"not a hex color: {value!r}")
        try:
            return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError as e:
            raise ValueError(f"not a hex color: {value!r}") from e

    @classmethod
    def coerce(cls, value: ColorLike) -> "Color":
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        channels = tuple(value)
        if len(channels) != 3:
            raise ValueError("an RGB color needs exactly three channels")
        return cls(*channels)

    def to_field(self) -> str:
        """Wire form, `r,g,b`."""
        return f"{self.r},{self.g},{self.b}"

    def to_hex(self) -> str:
        return f"{self.r:02x}{self.g:02x}{self.b:02x}"


def coerce_colors(values: Iterable[ColorLike]) -> List[Color]:
    """Convert a list of color-likes, raising a CONSTRUCTION error on bad input."""

    try:
        return [Color.coerce(v) for v in values]
    except (TypeError, ValueError) as e:
        raise TinEyeServiceError(ErrorKind.CONSTRUCTION, "invalid color", cause=e) from e


def check_weights(colors: Sequence[Color], weights: Sequence[float]) -> None:
    """Weights are optional, but when given there must be one per color."""

    if weights and len(weights) != len(colors):
        raise TinEyeServiceError(
            ErrorKind.CONSTRUCTION,
            f"weights must be empty or match colors in length ({len(weights)} != {len(colors)})",
        )


def check_color_format(color_format: str) -> str:
    fmt = (color_format or "").strip().lower()
    if fmt not in COLOR_FORMATS:
        raise TinEyeServiceError(
            ErrorKind.CONSTRUCTION, f"color_format must be one of {sorted(COLOR_FORMATS)}"
        )
    return fmt
