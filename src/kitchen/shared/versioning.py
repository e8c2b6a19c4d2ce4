"""Optimistic concurrency helpers for status-bearing aggregates."""

from protean.exceptions import ObjectNotFoundError


def is_stale(dao, aggregate) -> bool:
    """True when the stored copy moved past the version this aggregate was read at."""
    try:
        stored = dao.get(aggregate.id)
    except ObjectNotFoundError:
        return False
    return stored._version != aggregate._version
