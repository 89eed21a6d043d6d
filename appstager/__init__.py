"""Stage Go App Engine applications into self-contained upload directories."""

__all__ = ["__version__"]

__version__ = "0.1.0"
