"""Box follow-up — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer

from pipeline.box.box import Box, BoxStage
from pipeline.domain import pipeline
from pipeline.utils.concurrency import load_for_update, save


@pipeline.command(part_of="Box")
class ClaimFollowUp:
    box_id = Identifier(required=True)
    followed_up_by = Identifier()
    expected_version = Integer()


@pipeline.command(part_of="Box")
class CompleteFollowUp:
    box_id = Identifier(required=True)
    expected_version = Integer()


@pipeline.command_handler(part_of=Box)
class FollowUpHandler:
    @handle(ClaimFollowUp)
    def claim_follow_up(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        if command.followed_up_by:
            box.assign_actor(BoxStage.FOLLOW_UP, command.followed_up_by)
        status = box.claim_follow_up()
        save(repo, box)
        return status

    @handle(CompleteFollowUp)
    def complete_follow_up(self, command):
        repo, box = load_for_update(Box, command.box_id, command.expected_version)
        status = box.complete_follow_up()
        save(repo, box)
        return status
