"""Release automation for a Go backend with an embedded web frontend."""

__version__ = "0.4.0"
