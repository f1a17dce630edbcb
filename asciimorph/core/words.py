"""Big-letter words built from glyph masks over scrolling word layers."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .grid import random_glyphs
from .layers import Canvas, Layer, Mask

logger = logging.getLogger(__name__)


@dataclass
class Placement:
    char: str
    row: int
    col: int
    size: int


def split_words(text: str) -> List[str]:
    """Split on commas and whitespace; one long word becomes two lines."""
    words = [w for w in re.split(r"[,\s]+", text.strip()) if w]
    if len(words) == 1 and len(words[0]) > 7:
        word = words[0]
        mid = math.ceil(len(word) / 2)
        return [word[:mid], word[mid:]]
    return words


def layout_letters(
    lines: Sequence[str], rows: int, cols: int, padding_factor: float = 0.8
) -> List[Placement]:
    """Centre ``lines`` of square letters inside the padded grid."""
    lines = [line for line in lines if line]
    if not lines:
        return []
    avail_rows = math.floor(rows * padding_factor)
    avail_cols = math.floor(cols * padding_factor)
    max_len = max(len(line) for line in lines)

    size = max(1, min(avail_cols // max_len, avail_rows // len(lines)))
    spacing = max(1, math.floor(size * 0.1))

    word_width = max_len * (size + spacing) - spacing
    word_height = len(lines) * (size + spacing) - spacing
    start_row = (rows - word_height) // 2
    start_col = (cols - word_width) // 2

    placements = []
    for line_no, line in enumerate(lines):
        col = start_col + (word_width - len(line) * (size + spacing) + spacing) // 2
        row = start_row + line_no * (size + spacing)
        for ch in line:
            placements.append(Placement(ch, row, col, size))
            col += size + spacing
    return placements


class Letter:
    def __init__(
        self,
        rows: int,
        cols: int,
        placement: Placement,
        matrix: Optional[np.ndarray],
        related_words: Sequence[str] = (),
        scroll_speed: float = 1.0,
        rng: np.random.Generator | None = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.char = placement.char
        self.layer = Layer(rows, cols, self.rng)
        self.related_words = list(related_words)

        angle = self.rng.random() * 2 * math.pi
        self.dx = scroll_speed * math.cos(angle)
        self.dy = scroll_speed * math.sin(angle)

        if matrix is None:
            logger.error(f"No glyph found for character: {placement.char!r}")
            self.mask = Mask(rows, cols)
        else:
            self.mask = Mask.from_glyph(rows, cols, matrix, placement.row, placement.col, placement.size)

        if self.related_words:
            self.layer.tile_with_words(self.related_words, self.rng)

    def update_words(self, words: Sequence[str]) -> None:
        self.related_words = list(words)
        self.layer.tile_with_words(self.related_words, self.rng)


class Word:
    def __init__(
        self,
        lines: Sequence[str],
        rows: int,
        cols: int,
        glyphs,
        rng: np.random.Generator | None = None,
        padding_factor: float = 0.8,
    ):
        self.lines = list(lines)
        self.rows = rows
        self.cols = cols
        self.rng = rng if rng is not None else np.random.default_rng()
        self.related_words: List[str] = []
        self.letters: List[Letter] = [
            Letter(rows, cols, p, glyphs.get(p.char), self.related_words, rng=self.rng)
            for p in layout_letters(self.lines, rows, cols, padding_factor)
        ]

    @property
    def phrase(self) -> str:
        return " ".join(self.lines)

    def add_to_canvas(self, canvas: Canvas) -> None:
        for letter in self.letters:
            canvas.add_layer(letter.layer, letter.mask)

    def update_words(self, words: Sequence[str]) -> None:
        self.related_words = list(words)
        for letter in self.letters:
            letter.update_words(self.related_words)

    def flip_characters(self, probability: float) -> None:
        """Swap visible cells of every letter for random glyphs."""
        for letter in self.letters:
            rr, cc = np.nonzero(letter.mask.visible)
            hit = self.rng.random(rr.size) < probability
            if hit.any():
                letter.layer.grid.as_array()[rr[hit], cc[hit]] = random_glyphs(self.rng, int(hit.sum()))

    def scroll(self, amount: float) -> None:
        for letter in self.letters:
            letter.layer.scroll(amount * letter.dx, amount * letter.dy)

    def center_of_mass(self) -> Optional[Tuple[float, float]]:
        """Mean ``(x, y)`` over every visible letter cell."""
        total_x = total_y = 0
        count = 0
        for letter in self.letters:
            rr, cc = np.nonzero(letter.mask.visible)
            total_x += int(cc.sum())
            total_y += int(rr.sum())
            count += rr.size
        if count == 0:
            return None
        return total_x / count, total_y / count
