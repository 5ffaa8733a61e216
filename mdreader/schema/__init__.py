"""Persisted data models."""

from .position import PositionRecord
from .settings import AppSettings

__all__ = ["AppSettings", "PositionRecord"]
