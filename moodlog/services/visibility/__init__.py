"""Visibility services."""

from moodlog.services.visibility.visibility_filter import VisibilityFilter

__all__ = ["VisibilityFilter"]
