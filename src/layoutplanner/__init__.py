"""Sheet layout planning for design canvases."""

__version__ = "0.1.0"
