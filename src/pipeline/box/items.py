"""Box items — command and handler for placing items in a box."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from pipeline.box.box import Box
from pipeline.domain import pipeline
from pipeline.inventory.inventory_type import InventoryType
from pipeline.utils.concurrency import load_for_update, save


@pipeline.command(part_of="Box")
class AddBoxItem:
    """Place an item of the given inventory type in the box."""

    box_id = Identifier(required=True)
    inventory_type_id = Identifier(required=True)
    expected_version = Integer()


@pipeline.command_handler(part_of=Box)
class BoxItemHandler:
    @handle(AddBoxItem)
    def add_box_item(self, command):
        inventory_type = current_domain.repository_for(InventoryType).get(command.inventory_type_id)
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        item = box.add_item(inventory_type)
        save(repo, box)
        return str(item.id)
