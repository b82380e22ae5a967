"""Cheffy: recipe step extraction for cooking videos."""

__version__ = "0.1.0"

__all__ = ["__version__"]
