from __future__ import annotations

import html
import logging
import re
import threading
from typing import Callable, Dict, Sequence

from ..core.grid import Grid

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\w+")


def frame_to_text(frame: Grid) -> str:
    return frame.text()


def guess_full_word(fragment: str, related_words: Sequence[str]) -> str:
    """Best related word for a fragment cut off by the letter edges."""
    lower = fragment.lower()
    for word in related_words:
        w = word.lower()
        if w.startswith(lower) or w.endswith(lower):
            return word
    for word in related_words:
        if lower in word.lower():
            return word
    logger.debug(f"No full word found for: {fragment}")
    return fragment


def frame_to_html(frame: Grid, related_words: Sequence[str]) -> str:
    """Frame text with every word fragment linked to its guessed full word."""
    out = []
    for line in frame.lines():
        parts = []
        pos = 0
        for m in _WORD.finditer(line):
            parts.append(html.escape(line[pos : m.start()]))
            target = guess_full_word(m.group(), related_words)
            parts.append(
                f'<a href="#{html.escape(target, quote=True)}" '
                f'style="color: inherit; text-decoration: none;">{html.escape(m.group())}</a>'
            )
            pos = m.end()
        parts.append(html.escape(line[pos:]))
        out.append(f"<span>{''.join(parts)}</span>")
    return "\n".join(out)


class BufferRenderer:
    """Keeps the most recent rendering for whoever polls it (the web page)."""

    def __init__(self, related_words: Callable[[], Sequence[str]] = lambda: ()):
        self.related_words = related_words
        self._lock = threading.Lock()
        self._latest: Dict[str, object] = {"text": "", "html": "", "live": False, "frames": 0}

    def show(self, frame: Grid) -> None:
        text = frame_to_text(frame)
        with self._lock:
            self._latest = {
                "text": text,
                "html": html.escape(text),
                "live": False,
                "frames": self._latest["frames"] + 1,
            }

    def show_live(self, frame: Grid) -> None:
        markup = frame_to_html(frame, list(self.related_words()))
        with self._lock:
            self._latest = {
                "text": frame_to_text(frame),
                "html": markup,
                "live": True,
                "frames": self._latest["frames"] + 1,
            }

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return dict(self._latest)
