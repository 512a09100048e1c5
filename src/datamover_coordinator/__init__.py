"""Asynchronous data-mover operation coordinator."""

__version__ = "0.1.0"

__all__ = ["__version__"]
