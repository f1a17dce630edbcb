"""Helpers around the core: glyph rasterization and frame rendering."""
