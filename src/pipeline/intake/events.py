"""Box request domain events."""

from protean.fields import DateTime, Identifier, String

from pipeline.domain import pipeline


@pipeline.event(part_of="BoxRequest")
class BoxRequestSubmitted:
    """A request for a box was received."""

    __version__ = 1

    box_request_id = Identifier(required=True)
    requester_name = String(required=True)
    submitted_at = DateTime(required=True)


@pipeline.event(part_of="BoxRequest")
class ReviewClaimed:
    __version__ = 1

    box_request_id = Identifier(required=True)
    reviewed_by = Identifier(required=True)
    claimed_at = DateTime(required=True)


@pipeline.event(part_of="BoxRequest")
class ReviewCompleted:
    """The request passed review and its box was created."""

    __version__ = 1

    box_request_id = Identifier(required=True)
    box_id = Identifier(required=True)
    reviewed_by = Identifier(required=True)
    reviewed_at = DateTime(required=True)
