"""On-demand image variant server."""

__version__ = "0.1.0"
