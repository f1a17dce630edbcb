from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, List, Optional, Protocol

from .grid import RELEASED, Grid

logger = logging.getLogger(__name__)

Producer = Callable[[], Optional[bool]]


class Renderer(Protocol):
    def show(self, frame: Grid) -> None:
        """Draw a replay frame as plain text."""
        ...

    def show_live(self, frame: Grid) -> None:
        """Draw the newest queued frame, with any interactive decoration."""
        ...


class FrameScheduler:
    """Timed frame queue drained one frame per tick.

    Frames are appended at the tail and consumed at the cursor. After a frame
    is shown the one before it is replaced by :data:`RELEASED`, so only a
    couple of already-shown frames are ever retained. One background thread
    drives the ticks; the lock only serialises queue access with producers
    calling in from other threads.
    """

    def __init__(self, fps: float = 30, renderer: Renderer | None = None):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self.frame_duration = 1.0 / fps
        self.renderer = renderer
        self.frames: List[Grid] = []
        self._cursor = 0
        self._producers: List[Producer] = []
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_running(self) -> bool:
        return self._thread is not None

    def add_frame(self, frame: Grid) -> None:
        with self._lock:
            self.frames.append(frame)

    def add_frames(self, frames: Iterable[Grid]) -> None:
        with self._lock:
            self.frames.extend(frames)

    def last_frame(self) -> Optional[Grid]:
        with self._lock:
            return self.frames[-1] if self.frames else None

    def num_remaining_frames(self) -> int:
        with self._lock:
            return len(self.frames) - self._cursor

    def add_producer(self, producer: Producer) -> None:
        """Run ``producer`` at the start of every tick; returning False unregisters it."""
        self._producers.append(producer)

    def _run_producers(self) -> None:
        for producer in list(self._producers):
            try:
                keep = producer()
            except Exception:
                logger.exception(f"Frame producer {producer!r} failed, dropping it")
                keep = False
            if keep is False:
                self._producers.remove(producer)

    def tick(self) -> Optional[Grid]:
        """Advance one frame. Returns the frame shown, or None when starved."""
        self._run_producers()
        with self._lock:
            if self._cursor >= len(self.frames):
                return None
            frame = self.frames[self._cursor]
            live = self._cursor == len(self.frames) - 1
            if self._cursor > 0:
                self.frames[self._cursor - 1] = RELEASED
            self._cursor = min(self._cursor + 1, len(self.frames))

        if self.renderer is not None:
            if live:
                self.renderer.show_live(frame)
            else:
                self.renderer.show(frame)
        return frame

    def _loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.frame_duration):
            try:
                self.tick()
            except Exception:
                logger.exception("Render tick failed")

    def start(self) -> None:
        if self._thread is not None:
            return
        # one event per thread; a stopped loop keeps its own set event
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(self._stop,), name="frame-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(f"Frame scheduler started at {self.fps} fps")

    def stop(self) -> None:
        if self._thread is None:
            return
        thread, self._thread = self._thread, None
        self._stop.set()
        if thread is not threading.current_thread():
            thread.join()
        logger.info(f"Frame scheduler stopped at frame {self._cursor}/{len(self.frames)}")
