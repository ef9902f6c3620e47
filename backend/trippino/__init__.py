"""Trip planning backend: trips, ordered cities and the legs between them."""

__version__ = "0.1.0"
