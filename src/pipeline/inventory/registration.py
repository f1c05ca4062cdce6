"""Inventory type registration — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from pipeline.domain import pipeline
from pipeline.inventory.inventory_type import InventoryType


@pipeline.command(part_of="InventoryType")
class RegisterInventoryType:
    """Add an inventory type to the reference data."""

    name = String(required=True, max_length=200)
    requires_research = Boolean(default=False)


@pipeline.command(part_of="InventoryType")
class ChangeResearchRequirement:
    inventory_type_id = Identifier(required=True)
    requires_research = Boolean(required=True)


@pipeline.command_handler(part_of=InventoryType)
class InventoryTypeHandler:
    @handle(RegisterInventoryType)
    def register_inventory_type(self, command):
        inventory_type = InventoryType.register(
            name=command.name,
            requires_research=bool(command.requires_research),
        )
        current_domain.repository_for(InventoryType).add(inventory_type)
        return str(inventory_type.id)

    @handle(ChangeResearchRequirement)
    def change_research_requirement(self, command):
        repo = current_domain.repository_for(InventoryType)
        inventory_type = repo.get(command.inventory_type_id)
        inventory_type.change_research_requirement(command.requires_research)
        repo.add(inventory_type)
