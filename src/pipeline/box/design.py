"""Box design — commands and handler.

Claiming the design needs a named designer. Completing it needs at least one
item, and decides whether the box goes on to research or straight to
assembly.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from pipeline.box.box import Box, BoxStage
from pipeline.domain import pipeline
from pipeline.inventory.inventory_type import InventoryType
from pipeline.utils.concurrency import load_for_update, save

logger = structlog.get_logger(__name__)


@pipeline.command(part_of="Box")
class ClaimDesign:
    """Claim the design stage. ``designed_by`` is assigned first when given."""

    box_id = Identifier(required=True)
    designed_by = Identifier()
    expected_version = Integer()


@pipeline.command(part_of="Box")
class CompleteDesign:
    box_id = Identifier(required=True)
    expected_version = Integer()


def current_research_flags(box: Box) -> dict[str, bool]:
    """Look up the present research flag of every inventory type in the box."""
    repo = current_domain.repository_for(InventoryType)
    flags = {}
    for type_id in {str(item.inventory_type_id) for item in box.items or []}:
        flags[type_id] = bool(repo.get(type_id).requires_research)
    return flags


@pipeline.command_handler(part_of=Box)
class DesignHandler:
    @handle(ClaimDesign)
    def claim_design(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        if command.designed_by:
            box.assign_actor(BoxStage.DESIGN, command.designed_by)
        status = box.claim_design()
        save(repo, box)
        return status

    @handle(CompleteDesign)
    def complete_design(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        status = box.complete_design(current_research_flags(box))
        save(repo, box)
        logger.info("Box design completed", box_id=str(box.id), status=status)
        return status
