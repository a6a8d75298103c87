"""SQL migrations for the hosted database."""

from .runner import MigrationRunner

__all__ = ["MigrationRunner"]
