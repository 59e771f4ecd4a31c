"""Static photo-blog admin panel."""

__version__ = "1.0.0"
