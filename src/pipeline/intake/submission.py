"""Box request submission — command and handler."""

import json

from protean import handle
from protean.fields import Text
from protean.utils.globals import current_domain

from pipeline.domain import pipeline
from pipeline.intake.box_request import BoxRequest


@pipeline.command(part_of="BoxRequest")
class SubmitBoxRequest:
    """Submit a new box request captured by the intake form."""

    requester = Text(required=True)  # JSON object of requester fields
    summary = Text()
    question_re_affect = Text()
    question_re_current_situation = Text()
    question_re_referral_source = Text()


@pipeline.command_handler(part_of=BoxRequest)
class SubmitBoxRequestHandler:
    @handle(SubmitBoxRequest)
    def submit_box_request(self, command):
        requester = json.loads(command.requester) if isinstance(command.requester, str) else command.requester
        request = BoxRequest.submit(
            requester=requester,
            summary=command.summary,
            question_re_affect=command.question_re_affect,
            question_re_current_situation=command.question_re_current_situation,
            question_re_referral_source=command.question_re_referral_source,
        )
        current_domain.repository_for(BoxRequest).add(request)
        return str(request.id)
