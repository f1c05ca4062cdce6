"""Fake dispatcher adapter — records solicitations for testing."""

from uuid import uuid4

from pipeline.dispatcher.port import SolicitationDispatcherPort, SolicitationKind
from pipeline.exceptions import NotificationDispatchFailure


class FakeDispatcher(SolicitationDispatcherPort):
    """Dispatcher that records solicitations in memory for test assertions."""

    def __init__(self):
        self.dispatched: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Solicitation delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Solicitation delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def dispatch(self, kind: SolicitationKind, box, actor_id: str) -> str | None:
        kind = SolicitationKind(kind)
        if not self.should_succeed:
            raise NotificationDispatchFailure(kind.value, str(actor_id), self.failure_reason)

        message_id = f"solicitation-{uuid4().hex[:12]}"
        self.dispatched.append(
            {
                "message_id": message_id,
                "kind": kind.value,
                "box_id": str(box.id),
                "actor_id": str(actor_id),
            }
        )
        return message_id

    def dispatched_of(self, kind: SolicitationKind) -> list[dict]:
        return [record for record in self.dispatched if record["kind"] == SolicitationKind(kind).value]

    def reset(self):
        """Clear recorded solicitations (useful between tests)."""
        self.dispatched.clear()
        self.should_succeed = True
        self.failure_reason = "Solicitation delivery failed"
