"""Box shipping — claiming and recording the shipment of an assembled box."""

from protean import handle
from protean.fields import Identifier, Integer

from pipeline.box.box import Box, BoxStage
from pipeline.domain import pipeline
from pipeline.utils.concurrency import load_for_update, save


@pipeline.command(part_of="Box")
class ClaimShipping:
    box_id = Identifier(required=True)
    shipped_by = Identifier()
    expected_version = Integer()


@pipeline.command(part_of="Box")
class CompleteShipping:
    box_id = Identifier(required=True)
    expected_version = Integer()


@pipeline.command_handler(part_of=Box)
class ShippingHandler:
    @handle(ClaimShipping)
    def claim_shipping(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        if command.shipped_by:
            box.assign_actor(BoxStage.SHIPPING, command.shipped_by)
        status = box.claim_shipping()
        save(repo, box)
        return status

    @handle(CompleteShipping)
    def complete_shipping(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        status = box.complete_shipping()
        save(repo, box)
        return status
