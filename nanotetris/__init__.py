"""A falling-blocks puzzle game and the small pygame-based 2D engine it runs on."""

__version__ = "0.1.0"