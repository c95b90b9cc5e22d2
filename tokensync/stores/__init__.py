"""Persistent stores used by tokensync pipelines."""

from .sync_cache import SyncCache

__all__ = ["SyncCache"]
