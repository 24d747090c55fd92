"""Property Snap API: property listings, share pages and ads behind an in-memory cache."""

__version__ = "1.0.0"
