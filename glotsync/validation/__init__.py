"""Checks on downloaded translations."""

from .coverage import LocaleCoverage, locale_coverage

__all__ = ["LocaleCoverage", "locale_coverage"]
