"""Colour palette presets and parsing for highlighted regions."""

from __future__ import annotations

import re
from typing import Final, Mapping, Optional, Sequence, Tuple

Palette = Tuple[str, ...]

GREYSCALE: Final[Palette] = ("fff", "ccc")
RAINBOW: Final[Palette] = ("fff", "f88", "ffc088", "a2ff88", "88f9ff", "a288ff", "ff88ba")

BUILTIN_PRESETS: Final[Mapping[str, Palette]] = {
    "greyscale": GREYSCALE,
    "grayscale": GREYSCALE,
    "rainbow": RAINBOW,
}

_HEX_COLOR_RE = re.compile(r"^(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class PaletteError(ValueError):
    """Raised when a palette cannot be resolved into usable colours."""


def normalise_color(value: str) -> str:
    """Return ``value`` as bare lowercase hex digits, rejecting anything else."""

    text = value.strip()
    if text.startswith("#"):
        text = text[1:]
    if not _HEX_COLOR_RE.match(text):
        raise PaletteError(f"Invalid colour {value!r}; expected 3, 4, 6 or 8 hex digits")
    return text.lower()


def parse_palette(
    choice: Optional[str],
    *,
    presets: Optional[Mapping[str, Sequence[str]]] = None,
    default: str = "greyscale",
) -> Palette:
    """
    Resolve a palette from a preset name or a comma-separated colour list.

    User presets shadow the built-in ones. When ``choice`` is ``None`` the ``default``
    preset (or colour list) is used instead.

    Raises:
        PaletteError: If no colours remain or any colour is malformed.
    """

    text = (choice if choice is not None else default).strip()
    key = text.lower()
    if presets and key in presets:
        colors: Sequence[str] = presets[key]
    elif key in BUILTIN_PRESETS:
        colors = BUILTIN_PRESETS[key]
    else:
        colors = [part for part in (chunk.strip() for chunk in text.split(",")) if part]
    if not colors:
        raise PaletteError("No colours have been specified so no output can be produced!")
    return tuple(normalise_color(color) for color in colors)
