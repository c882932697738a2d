"""Obstacle detection from feature growth inside a fixed centre region of interest."""

__version__ = "0.1.0"

__all__ = ["config", "geometry", "matching", "flow", "confidence", "tracking", "detector"]