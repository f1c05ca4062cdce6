"""Box request review — commands and handler.

Completing a review persists both the reviewed request and the box it
creates, within the same unit of work.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from pipeline.box.box import Box
from pipeline.domain import pipeline
from pipeline.intake.box_request import BoxRequest
from pipeline.utils.concurrency import load_for_update, save

logger = structlog.get_logger(__name__)


@pipeline.command(part_of="BoxRequest")
class ClaimReview:
    """Claim the review. ``reviewed_by`` is assigned first when given."""

    box_request_id = Identifier(required=True)
    reviewed_by = Identifier()
    expected_version = Integer()


@pipeline.command(part_of="BoxRequest")
class CompleteReview:
    box_request_id = Identifier(required=True)
    expected_version = Integer()


@pipeline.command_handler(part_of=BoxRequest)
class ReviewHandler:
    @handle(ClaimReview)
    def claim_review(self, command):
        repo, request = load_for_update(BoxRequest, command.box_request_id, command.expected_version)
        if command.reviewed_by:
            request.reviewed_by = command.reviewed_by
        status = request.claim_review()
        save(repo, request)
        return status

    @handle(CompleteReview)
    def complete_review(self, command):
        repo, request = load_for_update(BoxRequest, command.box_request_id, command.expected_version)
        box = request.complete_review()
        current_domain.repository_for(Box).add(box)
        save(repo, request)
        logger.info("Box created for reviewed request", box_request_id=str(request.id), box_id=str(box.id))
        return str(box.id)
