"""Movie diary filtering, browsing and statistics."""

__version__ = "0.1.0"

__all__ = ["__version__"]
