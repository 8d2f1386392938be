"""Storefront API: product catalog, session carts and checkout."""

__version__ = "1.0.0"
