"""Solicitation aggregate (CQRS) — outbox record for one volunteer solicitation.

A solicitation is recorded every time a box completion needs to recruit the
next volunteer. The record tracks whether the dispatcher delivered it, so
failed deliveries can be retried without touching the box workflow.

State Machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → PENDING
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from pipeline.dispatcher.port import SolicitationKind
from pipeline.domain import pipeline
from pipeline.solicitation.events import (
    SolicitationFailed,
    SolicitationRecorded,
    SolicitationRetried,
    SolicitationSent,
)


class SolicitationStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


_VALID_TRANSITIONS = {
    SolicitationStatus.PENDING: {SolicitationStatus.SENT, SolicitationStatus.FAILED},
    SolicitationStatus.FAILED: {SolicitationStatus.PENDING},  # Via retry
    SolicitationStatus.SENT: set(),  # Terminal
}


@pipeline.aggregate
class Solicitation:
    kind: String(choices=SolicitationKind, required=True)
    box_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    source_event_type: String(max_length=200)

    status: String(choices=SolicitationStatus, default=SolicitationStatus.PENDING.value)
    message_id: String(max_length=200)
    failure_reason: String(max_length=500)
    sent_at: DateTime()

    retry_count: Integer(default=0)
    max_retries: Integer(default=3)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def record(cls, kind, box_id, recipient_id, source_event_type=None, max_retries=3):
        """Record a new solicitation in PENDING status."""
        now = datetime.now(UTC)
        kind = SolicitationKind(kind).value
        solicitation = cls(
            kind=kind,
            box_id=box_id,
            recipient_id=recipient_id,
            source_event_type=source_event_type,
            status=SolicitationStatus.PENDING.value,
            retry_count=0,
            max_retries=max_retries,
            created_at=now,
            updated_at=now,
        )
        solicitation.raise_(
            SolicitationRecorded(
                solicitation_id=str(solicitation.id),
                kind=kind,
                box_id=str(box_id),
                recipient_id=str(recipient_id),
                recorded_at=now,
            )
        )
        return solicitation

    def _assert_can_transition(self, target_status):
        current = SolicitationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def mark_sent(self, message_id=None, sent_at=None):
        self._assert_can_transition(SolicitationStatus.SENT)

        now = sent_at or datetime.now(UTC)
        self.status = SolicitationStatus.SENT.value
        self.message_id = message_id
        self.sent_at = now
        self.updated_at = now
        self.raise_(
            SolicitationSent(
                solicitation_id=str(self.id),
                kind=self.kind,
                box_id=str(self.box_id),
                recipient_id=str(self.recipient_id),
                sent_at=now,
            )
        )

    def mark_failed(self, reason):
        self._assert_can_transition(SolicitationStatus.FAILED)

        now = datetime.now(UTC)
        self.status = SolicitationStatus.FAILED.value
        self.failure_reason = reason
        self.retry_count = self.retry_count + 1
        self.updated_at = now
        self.raise_(
            SolicitationFailed(
                solicitation_id=str(self.id),
                kind=self.kind,
                box_id=str(self.box_id),
                reason=reason,
                retry_count=self.retry_count,
                failed_at=now,
            )
        )

    def retry(self):
        """Put a failed solicitation back in line for delivery."""
        if SolicitationStatus(self.status) != SolicitationStatus.FAILED:
            raise ValidationError({"status": ["Only failed solicitations can be retried"]})
        if self.retry_count >= self.max_retries:
            raise ValidationError({"retry_count": ["Maximum retry attempts exceeded"]})

        now = datetime.now(UTC)
        self.status = SolicitationStatus.PENDING.value
        self.failure_reason = None
        self.updated_at = now
        self.raise_(
            SolicitationRetried(
                solicitation_id=str(self.id),
                retry_count=self.retry_count,
                retried_at=now,
            )
        )
