"""Solicitation domain events — delivery lifecycle of a volunteer solicitation."""

from protean.fields import DateTime, Identifier, Integer, String

from pipeline.domain import pipeline


@pipeline.event(part_of="Solicitation")
class SolicitationRecorded:
    __version__ = 1

    solicitation_id = Identifier(required=True)
    kind = String(required=True)
    box_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    recorded_at = DateTime(required=True)


@pipeline.event(part_of="Solicitation")
class SolicitationSent:
    """The dispatcher accepted the solicitation."""

    __version__ = 1

    solicitation_id = Identifier(required=True)
    kind = String(required=True)
    box_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    sent_at = DateTime(required=True)


@pipeline.event(part_of="Solicitation")
class SolicitationFailed:
    __version__ = 1

    solicitation_id = Identifier(required=True)
    kind = String(required=True)
    box_id = Identifier(required=True)
    reason = String(required=True)
    retry_count = Integer()
    failed_at = DateTime(required=True)


@pipeline.event(part_of="Solicitation")
class SolicitationRetried:
    __version__ = 1

    solicitation_id = Identifier(required=True)
    retry_count = Integer()
    retried_at = DateTime(required=True)
