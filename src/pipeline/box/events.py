"""Box domain events — immutable facts about box pipeline transitions.

All events are past tense, versioned, and carry the volunteer who acted so
downstream handlers (solicitations in particular) never reload the box just
to find out who to address.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from pipeline.domain import pipeline


@pipeline.event(part_of="Box")
class BoxCreated:
    """A box was created for a reviewed box request."""

    __version__ = 1

    box_id = Identifier(required=True)
    box_request_id = Identifier(required=True)
    created_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class BoxItemAdded:
    """An item was placed in the box."""

    __version__ = 1

    box_id = Identifier(required=True)
    item_id = Identifier(required=True)
    inventory_type_id = Identifier(required=True)
    requires_research = Boolean(default=False)


@pipeline.event(part_of="Box")
class DesignClaimed:
    __version__ = 1

    box_id = Identifier(required=True)
    designed_by = Identifier(required=True)
    claimed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class DesignCompleted:
    """The design was finished.

    ``research_required`` tells which branch was taken: ``designed`` when
    some item needs research, ``researched`` when the research stage is
    skipped.
    """

    __version__ = 1

    box_id = Identifier(required=True)
    designed_by = Identifier(required=True)
    research_required = Boolean(default=False)
    status = String(required=True)
    item_count = Integer()
    completed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class ResearchClaimed:
    __version__ = 1

    box_id = Identifier(required=True)
    researched_by = Identifier(required=True)
    claimed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class ResearchCompleted:
    """Every item in the box has been researched."""

    __version__ = 1

    box_id = Identifier(required=True)
    researched_by = Identifier(required=True)
    item_count = Integer()
    researched_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class AssemblyClaimed:
    __version__ = 1

    box_id = Identifier(required=True)
    assembled_by = Identifier(required=True)
    claimed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class AssemblyCompleted:
    """The box was packed and is waiting for a shipper."""

    __version__ = 1

    box_id = Identifier(required=True)
    assembled_by = Identifier(required=True)
    completed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class ShippingClaimed:
    __version__ = 1

    box_id = Identifier(required=True)
    shipped_by = Identifier(required=True)
    claimed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class ShippingCompleted:
    __version__ = 1

    box_id = Identifier(required=True)
    shipped_by = Identifier(required=True)
    shipped_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class FollowUpClaimed:
    __version__ = 1

    box_id = Identifier(required=True)
    followed_up_by = Identifier(required=True)
    claimed_at = DateTime(required=True)


@pipeline.event(part_of="Box")
class FollowUpCompleted:
    """The recipient was contacted after delivery; the box is done."""

    __version__ = 1

    box_id = Identifier(required=True)
    followed_up_by = Identifier(required=True)
    completed_at = DateTime(required=True)
