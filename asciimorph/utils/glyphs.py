from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


def decode_matrix(encoded: Mapping) -> np.ndarray:
    """Expand a run-length encoded glyph into a boolean ``height x width`` matrix.

    ``encoded`` holds ``values`` and ``lengths`` (one run each) for the
    flattened pixel rows, plus the declared ``width`` and ``height``.
    """
    values = encoded["values"]
    lengths = encoded["lengths"]
    width = int(encoded["width"])
    height = int(encoded["height"])
    if len(values) != len(lengths):
        raise ValueError(f"{len(values)} run values but {len(lengths)} run lengths")
    flat = np.repeat(np.asarray(values, dtype=bool), np.asarray(lengths, dtype=np.int64))
    if flat.size != width * height:
        raise ValueError(f"runs cover {flat.size} pixels, expected {width}x{height}")
    return flat.reshape(height, width)


def encode_matrix(matrix: np.ndarray) -> Dict[str, object]:
    matrix = np.asarray(matrix).astype(np.uint8)
    height, width = matrix.shape
    flat = matrix.reshape(-1)
    if flat.size == 0:
        return {"values": [], "lengths": [], "width": width, "height": height}
    starts = np.flatnonzero(np.diff(flat)) + 1
    bounds = np.concatenate(([0], starts, [flat.size]))
    return {
        "values": [int(v) for v in flat[bounds[:-1]]],
        "lengths": [int(n) for n in np.diff(bounds)],
        "width": int(width),
        "height": int(height),
    }


def rasterize_char(char: str, font: ImageFont.ImageFont | None = None, threshold: int = 128) -> np.ndarray:
    """Draw one character with Pillow and return its inked pixels, cropped."""
    if font is None:
        font = ImageFont.load_default()
    left, top, right, bottom = font.getbbox(char)
    w, h = right - left, bottom - top
    if w <= 0 or h <= 0:
        return np.zeros((0, 0), dtype=bool)
    img = Image.new("L", (w, h), color=0)
    draw = ImageDraw.Draw(img)
    draw.text((-left, -top), char, fill=255, font=font)
    ink = np.array(img) >= threshold
    if not ink.any():
        return np.zeros((0, 0), dtype=bool)
    rows = np.flatnonzero(ink.any(axis=1))
    cols = np.flatnonzero(ink.any(axis=0))
    return ink[rows[0] : rows[-1] + 1, cols[0] : cols[-1] + 1]


class GlyphTable:
    """Character to boolean matrix lookup.

    Encoded entries win; anything else is rasterized with Pillow and cached.
    """

    def __init__(
        self,
        encoded: Mapping[str, Mapping] | None = None,
        font: ImageFont.ImageFont | None = None,
        font_size: int = 48,
    ):
        self.encoded = dict(encoded or {})
        self.font = font if font is not None else ImageFont.load_default(size=font_size)
        self._cache: Dict[str, Optional[np.ndarray]] = {}

    @classmethod
    def from_json(cls, path: str | Path, font: ImageFont.ImageFont | None = None, font_size: int = 48) -> "GlyphTable":
        with open(path, encoding="utf-8") as f:
            encoded = json.load(f)
        logger.info(f"Loaded {len(encoded)} glyphs from {path}")
        return cls(encoded, font=font, font_size=font_size)

    def __contains__(self, char: str) -> bool:
        return self.get(char) is not None

    def get(self, char: str) -> Optional[np.ndarray]:
        if char not in self._cache:
            if char in self.encoded:
                matrix = decode_matrix(self.encoded[char])
            else:
                matrix = rasterize_char(char, self.font)
            self._cache[char] = matrix if matrix.any() else None
        return self._cache[char]
