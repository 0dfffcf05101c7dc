"""Core helpers for declaring feed models."""

from .feed_field import feed_field

__all__ = ["feed_field"]
