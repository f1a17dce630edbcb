from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnimatorConfig:
    rows: int = 40
    cols: int = 120
    fps: int = 30
    transition_frames: Optional[int] = None  # defaults to fps // 3
    update_steps: int = 10
    flip_probability: float = 0.05
    scroll_speed: float = 1.5
    padding_factor: float = 0.8
    autoplay_interval: float = 5.0
    related_words_url: Optional[str] = None
    request_timeout: float = 5.0
    glyph_table_path: Optional[str] = None
    glyph_font_size: int = 48
    seed: Optional[int] = None

    def __post_init__(self):
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"grid must have positive size, got {self.rows}x{self.cols}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.transition_frames is None:
            self.transition_frames = max(1, self.fps // 3)
        if self.transition_frames < 1 or self.update_steps < 1:
            raise ValueError("transition step counts must be at least 1")
        if not 0.0 <= self.flip_probability <= 1.0:
            raise ValueError(f"flip_probability must be in [0, 1], got {self.flip_probability}")
        if not 0.0 < self.padding_factor <= 1.0:
            raise ValueError(f"padding_factor must be in (0, 1], got {self.padding_factor}")

    @property
    def frame_duration(self) -> float:
        return 1.0 / self.fps
