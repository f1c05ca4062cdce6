"""Solicitation dispatcher port — abstract interface for recruiting volunteers.

The workflow programs against this port; adapters are swapped via
configuration. Delivery is fire-and-forget from the workflow's point of view:
adapters raise ``NotificationDispatchFailure`` when they cannot deliver, and
the return value is only used for logging.
"""

from abc import ABC, abstractmethod
from enum import Enum


class SolicitationKind(Enum):
    RESEARCH = "research_solicitation"
    ASSEMBLY = "assembly_solicitation"
    SHIPPING = "shipping_solicitation"


class SolicitationDispatcherPort(ABC):
    """Abstract interface for solicitation dispatch adapters."""

    @abstractmethod
    def dispatch(self, kind: SolicitationKind, box, actor_id: str) -> str | None:
        """Send a ``kind`` solicitation about ``box`` to the volunteer ``actor_id``.

        Returns:
            An adapter-specific message id, if the adapter has one.
        """
        ...
