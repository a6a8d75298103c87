"""Shared repository layer."""

from .activity import ActivityRepository

__all__ = ["ActivityRepository"]
