"""Session-gated music voting site."""

__version__ = "1.0.0"
