"""Rule engine for a chess variant with rolled piece availability."""

__version__ = "0.1.0"
