"""Workflow errors raised by pipeline aggregates and command handlers.

Rule violations follow Protean's convention of a ``ValidationError`` carrying
a field -> messages dict, so callers that only care about "the command was
rejected" can keep catching ``ValidationError``.
"""

from protean.exceptions import ValidationError


class InvalidTransition(ValidationError):
    """The event was fired while the entity was not in its source state."""

    def __init__(self, event: str, current: str, target: str):
        self.event = event
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot {event.replace('_', ' ')} from {current} (target: {target})"]})


class GuardNotSatisfied(ValidationError):
    """The source state matched but a precondition of the event failed."""

    def __init__(self, event: str, field: str, message: str):
        self.event = event
        self.field = field
        super().__init__({field: [message]})


class ConcurrencyConflict(Exception):
    """The aggregate changed since the caller last read it."""

    def __init__(self, aggregate: str, identifier: str, expected_version: int, actual_version: int | None = None):
        self.aggregate = aggregate
        self.identifier = identifier
        self.expected_version = expected_version
        self.actual_version = actual_version
        if actual_version is None:
            detail = f"was saved by another writer after version {expected_version}"
        else:
            detail = f"is at version {actual_version}, expected {expected_version}"
        super().__init__(f"{aggregate} {identifier} {detail}; reload and retry")


class NotificationDispatchFailure(Exception):
    """A dispatcher adapter could not deliver a solicitation."""

    def __init__(self, kind: str, recipient_id: str, reason: str):
        self.kind = kind
        self.recipient_id = recipient_id
        self.reason = reason
        super().__init__(f"{kind} to {recipient_id} failed: {reason}")
