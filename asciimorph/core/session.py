from __future__ import annotations

import logging
import math
import threading
import time
from functools import partial
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..config import AnimatorConfig
from ..utils.glyphs import GlyphTable
from ..utils.render import BufferRenderer
from .interpolate import interpolate_approximate_ot, interpolate_random_flip
from .layers import Canvas
from .related import DEFAULT_RELATED_WORDS, fetch_related_words
from .scheduler import FrameScheduler, Renderer
from .words import Word, split_words

logger = logging.getLogger(__name__)


class AnimationSession:
    """Owns the scheduler, the active canvas and the active word.

    Showing a word dissolves the previous frame into it, then keeps the
    letters shimmering until the related words arrive and are tiled into
    the letter layers. All frame production happens either in the caller's
    thread under the session lock or in a scheduler producer.
    """

    def __init__(
        self,
        config: AnimatorConfig | None = None,
        renderer: Renderer | None = None,
        glyphs: GlyphTable | None = None,
        rng: np.random.Generator | None = None,
        fetch: Callable[[str], List[str]] | None = None,
        background: bool = True,
    ):
        self.config = config or AnimatorConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        if glyphs is None:
            if self.config.glyph_table_path:
                glyphs = GlyphTable.from_json(self.config.glyph_table_path, font_size=self.config.glyph_font_size)
            else:
                glyphs = GlyphTable(font_size=self.config.glyph_font_size)
        self.glyphs = glyphs
        self.fetch = fetch or partial(
            fetch_related_words,
            url=self.config.related_words_url,
            timeout=self.config.request_timeout,
        )
        self.background = background
        self.renderer = renderer if renderer is not None else BufferRenderer(lambda: self.related_words)
        self.scheduler = FrameScheduler(self.config.fps, self.renderer)
        self.scheduler.add_producer(self._on_tick)

        self.canvas: Optional[Canvas] = None
        self.word: Optional[Word] = None
        self.transitioning = False
        self.autoplay = False
        self._autoplay_ticks = 0
        self._generation = 0
        self._pending: Optional[List[str]] = None
        self._last_scroll = float("-inf")
        self._lock = threading.RLock()

    @property
    def related_words(self) -> List[str]:
        return self.word.related_words if self.word is not None else []

    def start(self, lines: Sequence[str] = ("Hello",)) -> None:
        self.show_words(lines)
        self.scheduler.start()

    def stop(self) -> None:
        self.autoplay = False
        self.scheduler.stop()

    def show_words(self, lines: Sequence[str]) -> None:
        lines = [line for line in lines if line]
        if not lines:
            raise ValueError("show_words needs at least one non-empty line")
        cfg = self.config
        with self._lock:
            canvas = Canvas(cfg.rows, cfg.cols)
            word = Word(lines, cfg.rows, cfg.cols, self.glyphs, self.rng, cfg.padding_factor)
            word.add_to_canvas(canvas)
            target = canvas.get_frame()

            previous = self.scheduler.last_frame()
            if previous is None:
                self.scheduler.add_frame(target)
            else:
                self.scheduler.add_frames(
                    interpolate_approximate_ot(previous, target, cfg.transition_frames, self.rng)
                )

            self.canvas, self.word = canvas, word
            self.transitioning = True
            self._pending = None
            self._generation += 1
            generation = self._generation
        logger.info(f"Showing {lines}")
        self._request_related(word.phrase, generation)

    def _request_related(self, phrase: str, generation: int) -> None:
        def work():
            try:
                words = self.fetch(phrase)
            except Exception:
                logger.exception(f"Related words lookup for {phrase!r} failed")
                words = list(DEFAULT_RELATED_WORDS)
            with self._lock:
                if generation == self._generation:
                    self._pending = list(words)

        if self.background:
            threading.Thread(target=work, name="related-words", daemon=True).start()
        else:
            work()

    def _on_tick(self) -> bool:
        with self._lock:
            if self.word is None:
                return True
            if self._pending is not None:
                words, self._pending = self._pending, None
                self._apply_related(words)
            elif self.transitioning:
                self.word.flip_characters(self.config.flip_probability)
                self.scheduler.add_frame(self.canvas.get_frame())

            if self.autoplay:
                self._autoplay_ticks += 1
                if self._autoplay_ticks >= self.config.autoplay_interval * self.config.fps:
                    self._autoplay_ticks = 0
                    self._autoplay_step()
        return True

    def _apply_related(self, words: List[str]) -> None:
        before = self.canvas.get_frame()
        self.word.update_words(words)
        after = self.canvas.get_frame()
        self.scheduler.add_frames(
            interpolate_random_flip(before, after, self.config.update_steps, self.rng)
        )
        self.transitioning = False

    def _autoplay_step(self) -> None:
        related = self.related_words
        if not related:
            return
        choice = related[int(self.rng.integers(0, len(related)))]
        self.show_words(split_words(choice))

    def scroll(self, direction: float, now: float | None = None) -> bool:
        """Slide every letter layer along its own direction. Returns True if applied."""
        direction = float(direction)
        if not math.isfinite(direction) or direction == 0:
            return False
        with self._lock:
            if self.transitioning or self.word is None:
                return False
            now = time.monotonic() if now is None else now
            if now - self._last_scroll < self.config.frame_duration:
                return False
            self._last_scroll = now
            self.word.scroll(self.config.scroll_speed * float(np.sign(direction)))
            if self.scheduler.num_remaining_frames() < 2:
                self.scheduler.add_frame(self.canvas.get_frame())
        return True

    def toggle_autoplay(self) -> bool:
        with self._lock:
            self.autoplay = not self.autoplay
            self._autoplay_ticks = 0
        logger.info(f"Autoplay {'started' if self.autoplay else 'stopped'}")
        return self.autoplay
