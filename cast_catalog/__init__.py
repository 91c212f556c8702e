"""
cast-catalog: loads and decodes the media catalog manifest used by cast sender apps.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
