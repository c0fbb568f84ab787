"""Storefront client core: cart state, image resolution and UI event wiring."""

__version__ = "0.1.0"
