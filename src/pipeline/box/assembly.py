"""Box assembly — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer

from pipeline.box.box import Box, BoxStage
from pipeline.domain import pipeline
from pipeline.utils.concurrency import load_for_update, save


@pipeline.command(part_of="Box")
class ClaimAssembly:
    box_id = Identifier(required=True)
    assembled_by = Identifier()
    expected_version = Integer()


@pipeline.command(part_of="Box")
class CompleteAssembly:
    box_id = Identifier(required=True)
    expected_version = Integer()


@pipeline.command_handler(part_of=Box)
class AssemblyHandler:
    @handle(ClaimAssembly)
    def claim_assembly(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        if command.assembled_by:
            box.assign_actor(BoxStage.ASSEMBLY, command.assembled_by)
        status = box.claim_assembly()
        save(repo, box)
        return status

    @handle(CompleteAssembly)
    def complete_assembly(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        status = box.complete_assembly()
        save(repo, box)
        return status
