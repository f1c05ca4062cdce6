"""InventoryType aggregate — reference data for items placed in boxes.

An inventory type names a kind of item (a journal, a stuffed animal, a
book) and says whether a volunteer must research a concrete product for it
before the box can be assembled.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from pipeline.domain import pipeline
from pipeline.inventory.events import InventoryTypeRegistered, ResearchRequirementChanged


@pipeline.aggregate
class InventoryType:
    name = String(required=True, max_length=200)
    requires_research = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, name: str, requires_research: bool = False):
        now = datetime.now(UTC)
        inventory_type = cls(
            name=name,
            requires_research=requires_research,
            created_at=now,
            updated_at=now,
        )
        inventory_type.raise_(
            InventoryTypeRegistered(
                inventory_type_id=str(inventory_type.id),
                name=name,
                requires_research=requires_research,
                registered_at=now,
            )
        )
        return inventory_type

    def change_research_requirement(self, requires_research: bool) -> None:
        """Flip the research flag; boxes pick it up at their next design completion."""
        if bool(self.requires_research) == requires_research:
            return

        now = datetime.now(UTC)
        self.requires_research = requires_research
        self.updated_at = now
        self.raise_(
            ResearchRequirementChanged(
                inventory_type_id=str(self.id),
                requires_research=requires_research,
                changed_at=now,
            )
        )
