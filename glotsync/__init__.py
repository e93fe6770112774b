"""Localization and App Store metadata lanes for the WordPress iOS apps."""

__version__ = "0.1.0"
