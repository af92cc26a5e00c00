"""Email notifications for a check-monitoring host."""

from .plugin import install

__version__ = "0.1.0"

__all__ = ["install", "__version__"]
