"""Box research — commands and handler.

Only reachable for boxes whose design left them DESIGNED, i.e. at least one
item needs a concrete product researched before assembly.
"""

from protean import handle
from protean.fields import Identifier, Integer

from pipeline.box.box import Box, BoxStage
from pipeline.domain import pipeline
from pipeline.utils.concurrency import load_for_update, save


@pipeline.command(part_of="Box")
class ClaimResearch:
    box_id = Identifier(required=True)
    researched_by = Identifier()
    expected_version = Integer()


@pipeline.command(part_of="Box")
class CompleteResearch:
    box_id = Identifier(required=True)
    expected_version = Integer()


@pipeline.command_handler(part_of=Box)
class ResearchHandler:
    @handle(ClaimResearch)
    def claim_research(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        if command.researched_by:
            box.assign_actor(BoxStage.RESEARCH, command.researched_by)
        status = box.claim_research()
        save(repo, box)
        return status

    @handle(CompleteResearch)
    def complete_research(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        status = box.complete_research()
        save(repo, box)
        return status
