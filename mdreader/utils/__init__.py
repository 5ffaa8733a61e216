"""Shared helpers."""

from .hashing import content_hash

__all__ = ["content_hash"]
