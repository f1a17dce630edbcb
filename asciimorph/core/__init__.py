"""Core animation primitives for ASCII Morph.

Modules:
- grid: character grids and points
- pointcloud: greedy point matching for transport-style transitions
- interpolate: transitions between two grids
- layers: scrolling layers, visibility masks and the compositing canvas
- scheduler: timed frame queue
- words: big-letter words built from glyph masks
- related: related-words lookup with a fixed fallback
- session: the context object tying the above together
"""
