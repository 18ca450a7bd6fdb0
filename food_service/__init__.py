"""Food ordering backend: catalog, carts, checkout and admin order management."""

__version__ = "0.1.0"
