"""Inventory type domain events."""

from protean.fields import Boolean, DateTime, Identifier, String

from pipeline.domain import pipeline


@pipeline.event(part_of="InventoryType")
class InventoryTypeRegistered:
    """A new inventory type was added to the reference data."""

    __version__ = 1

    inventory_type_id = Identifier(required=True)
    name = String(required=True)
    requires_research = Boolean(default=False)
    registered_at = DateTime(required=True)


@pipeline.event(part_of="InventoryType")
class ResearchRequirementChanged:
    """An inventory type's research flag was switched."""

    __version__ = 1

    inventory_type_id = Identifier(required=True)
    requires_research = Boolean(default=False)
    changed_at = DateTime(required=True)
