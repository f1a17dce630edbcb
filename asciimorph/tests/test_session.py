"""Tests for the animation session tying words, canvas and scheduler together."""
import threading
import time

import numpy as np
import pytest

from asciimorph.config import AnimatorConfig
from asciimorph.core.grid import Grid
from asciimorph.core.session import AnimationSession

BLOCK = np.ones((4, 4), dtype=bool)


class BlockGlyphs:
    def get(self, char):
        return BLOCK


def _session(fetch=None, background=False, **overrides):
    cfg = AnimatorConfig(**dict(dict(rows=12, cols=30, fps=30, update_steps=4), **overrides))
    return AnimationSession(
        cfg,
        glyphs=BlockGlyphs(),
        rng=np.random.default_rng(0),
        fetch=fetch or (lambda phrase: ["sea", "wave"]),
        background=background,
    )


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestShowWords:
    def test_first_word_queues_its_frame(self):
        s = _session()
        s.show_words(["hi"])
        assert s.scheduler.num_remaining_frames() == 1
        assert s.scheduler.last_frame() == s.canvas.get_frame()
        assert s.transitioning

    def test_empty_input_rejected(self):
        with pytest.raises(ValueError):
            _session().show_words(["", ""])

    def test_next_word_dissolves_from_last_frame(self):
        s = _session()
        s.show_words(["hi"])
        before = s.scheduler.num_remaining_frames()
        s.show_words(["yo"])
        assert s.scheduler.num_remaining_frames() == before + s.config.transition_frames + 1
        assert s.word.lines == ["yo"]

    def test_related_words_applied_with_flip_transition(self):
        s = _session()
        s.show_words(["hi"])
        s.scheduler.tick()
        assert not s.transitioning
        assert s.related_words == ["sea", "wave"]
        # initial frame shown, update_steps + 1 flip frames queued
        assert s.scheduler.num_remaining_frames() == s.config.update_steps + 1
        final = s.scheduler.last_frame()
        assert final == s.canvas.get_frame()
        assert set(final.cells) <= set("seawv. ")

    def test_fetch_failure_falls_back_to_defaults(self):
        def broken(phrase):
            raise RuntimeError("service down")

        s = _session(fetch=broken)
        s.show_words(["hi"])
        s.scheduler.tick()
        assert "melody" in s.related_words


class TestWhileFetching:
    def test_letters_shimmer_until_words_arrive(self):
        gate = threading.Event()

        def slow(phrase):
            gate.wait(2.0)
            return ["tide"]

        s = _session(fetch=slow, background=True)
        s.show_words(["hi"])
        for _ in range(3):
            assert s.scheduler.tick() is not None
            assert s.transitioning
        assert s.scheduler.num_remaining_frames() == 1

        gate.set()
        assert _wait_for(lambda: s._pending is not None)
        s.scheduler.tick()
        assert not s.transitioning
        assert s.related_words == ["tide"]

    def test_stale_results_discarded(self):
        gates = {"hi": threading.Event(), "yo": threading.Event()}

        def fetch(phrase):
            gates[phrase].wait(2.0)
            return [phrase + "-related"]

        s = _session(fetch=fetch, background=True)
        s.show_words(["hi"])
        s.show_words(["yo"])
        gates["yo"].set()
        assert _wait_for(lambda: s._pending == ["yo-related"])
        gates["hi"].set()
        time.sleep(0.1)
        assert s._pending == ["yo-related"]


class TestScroll:
    def _ready(self):
        s = _session()
        s.show_words(["hi"])
        s.scheduler.tick()
        return s

    def test_ignored_while_transitioning(self):
        s = _session()
        s.show_words(["hi"])
        assert s.scroll(1, now=10.0) is False

    def test_moves_letters_and_tops_up_queue(self):
        s = self._ready()
        while s.scheduler.num_remaining_frames():
            s.scheduler.tick()
        letter = s.word.letters[0]
        assert s.scroll(-3, now=10.0) is True
        assert letter.layer.offset_x == pytest.approx(-1.5 * letter.dx)
        assert letter.layer.offset_y == pytest.approx(-1.5 * letter.dy)
        assert s.scheduler.num_remaining_frames() == 1

    def test_throttled_to_frame_rate(self):
        s = self._ready()
        assert s.scroll(1, now=10.0) is True
        assert s.scroll(1, now=10.0 + s.config.frame_duration / 2) is False
        assert s.scroll(1, now=10.0 + 2 * s.config.frame_duration) is True

    def test_zero_direction_is_ignored(self):
        assert self._ready().scroll(0, now=10.0) is False

    def test_non_finite_direction_is_ignored(self):
        s = self._ready()
        offsets = [(l.layer.offset_x, l.layer.offset_y) for l in s.word.letters]
        assert s.scroll(float("nan"), now=10.0) is False
        assert s.scroll(float("inf"), now=11.0) is False
        assert s.scroll(float("-inf"), now=12.0) is False
        assert [(l.layer.offset_x, l.layer.offset_y) for l in s.word.letters] == offsets
        assert s.canvas.get_frame().shape == (s.config.rows, s.config.cols)

    def test_no_top_up_when_frames_queued(self):
        s = self._ready()
        remaining = s.scheduler.num_remaining_frames()
        assert remaining >= 2
        s.scroll(1, now=10.0)
        assert s.scheduler.num_remaining_frames() == remaining


class TestAutoplay:
    def test_toggle(self):
        s = _session()
        assert s.toggle_autoplay() is True
        assert s.toggle_autoplay() is False

    def test_shows_a_related_word_after_interval(self):
        s = _session(autoplay_interval=0.1)
        s.show_words(["hi"])
        s.toggle_autoplay()
        for _ in range(3):
            s.scheduler.tick()
        assert s.word.phrase in ("sea", "wave")


class TestLifecycle:
    def test_start_renders_and_stop_halts(self):
        s = _session(fps=100)
        s.start(["hi"])
        try:
            assert s.scheduler.is_running
            assert _wait_for(lambda: s.renderer.snapshot()["frames"] > 0)
        finally:
            s.stop()
        assert not s.scheduler.is_running
        assert not s.autoplay

    def test_default_glyph_table_draws_letters(self):
        s = AnimationSession(AnimatorConfig(rows=20, cols=40), rng=np.random.default_rng(0), background=False)
        s.show_words(["A"])
        frame = s.scheduler.last_frame()
        assert isinstance(frame, Grid)
        assert frame.non_blank_points()
