"""Optimistic concurrency around load → guard → mutate → save."""

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from pipeline.exceptions import ConcurrencyConflict


def load_for_update(aggregate_cls, identifier, expected_version=None):
    """Load an aggregate, rejecting the caller if it holds a stale version.

    Returns ``(repository, aggregate)``. When ``expected_version`` is None the
    check is skipped here, and a writer that loses the race is still caught
    by ``save``.
    """
    repo = current_domain.repository_for(aggregate_cls)
    aggregate = repo.get(identifier)
    if expected_version is not None and aggregate._version != expected_version:
        raise ConcurrencyConflict(
            aggregate_cls.__name__,
            str(identifier),
            expected_version,
            aggregate._version,
        )
    return repo, aggregate


def save(repo, aggregate):
    """Persist an aggregate read by ``load_for_update``.

    Raises ConcurrencyConflict when another writer saved the aggregate after
    it was loaded.
    """
    loaded_version = aggregate._version
    try:
        repo.add(aggregate)
    except ExpectedVersionError as exc:
        raise ConcurrencyConflict(
            aggregate.__class__.__name__,
            str(aggregate.id),
            loaded_version,
        ) from exc
    return aggregate
