"""Static-test dashboard: serial capture, CSV analysis and impulse summaries."""

__version__ = "0.1.0"
__all__ = ["__version__"]