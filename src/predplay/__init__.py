"""PredPlay - offline sports prediction game engine."""

__version__ = "0.1.0"
