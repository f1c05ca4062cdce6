"""RetrySolicitation command + handler — redeliver a failed solicitation."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from pipeline.domain import pipeline
from pipeline.solicitation.dispatch import deliver
from pipeline.solicitation.solicitation import Solicitation


@pipeline.command(part_of="Solicitation")
class RetrySolicitation:
    """Request to retry a failed solicitation."""

    solicitation_id: Identifier(required=True)


@pipeline.command_handler(part_of=Solicitation)
class RetrySolicitationHandler:
    @handle(RetrySolicitation)
    def retry_solicitation(self, command: RetrySolicitation):
        repo = current_domain.repository_for(Solicitation)
        solicitation = repo.get(command.solicitation_id)
        solicitation.retry()
        deliver(solicitation)
        repo.add(solicitation)
        return solicitation.status
