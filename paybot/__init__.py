"""Storefront purchase notifications to in-game rewards."""

__version__ = "1.0.0"
