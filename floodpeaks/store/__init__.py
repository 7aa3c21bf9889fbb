"""Persisted peak event cache."""

from floodpeaks.store.event_store import EventStore

__all__ = ["EventStore"]
