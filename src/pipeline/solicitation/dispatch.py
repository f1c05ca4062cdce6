"""Solicitation handler — recruits the next volunteer when a stage completes.

Reacts to box events and sends solicitations through the dispatcher port:

    DesignCompleted (research required)  → research solicitation to the designer
    DesignCompleted (no research needed) → assembly solicitation to the designer
    AssemblyCompleted                    → shipping solicitation to the assembler

Every solicitation is recorded before it is dispatched. Dispatch failures,
unexpected adapter errors included, mark the record FAILED for a later
retry; they never reach the box, whose transition has already been committed.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from pipeline.box.box import Box
from pipeline.box.events import AssemblyCompleted, DesignCompleted
from pipeline.dispatcher import get_dispatcher
from pipeline.dispatcher.port import SolicitationKind
from pipeline.domain import pipeline
from pipeline.exceptions import NotificationDispatchFailure
from pipeline.solicitation.solicitation import Solicitation, SolicitationStatus

logger = structlog.get_logger(__name__)


def solicitation_for(event) -> tuple[SolicitationKind, str] | None:
    """Return the (kind, recipient) a box event solicits, or None."""
    if isinstance(event, DesignCompleted):
        kind = SolicitationKind.RESEARCH if event.research_required else SolicitationKind.ASSEMBLY
        return kind, str(event.designed_by)
    if isinstance(event, AssemblyCompleted):
        return SolicitationKind.SHIPPING, str(event.assembled_by)
    return None


def deliver(solicitation: Solicitation) -> None:
    """Dispatch a PENDING solicitation and record the outcome on it.

    The caller persists the solicitation afterwards.
    """
    try:
        box = current_domain.repository_for(Box).get(solicitation.box_id)
    except ObjectNotFoundError:
        logger.error(
            "Box for solicitation not found",
            solicitation_id=str(solicitation.id),
            box_id=str(solicitation.box_id),
        )
        solicitation.mark_failed(f"Box {solicitation.box_id} not found")
        return

    try:
        message_id = get_dispatcher().dispatch(
            SolicitationKind(solicitation.kind),
            box,
            str(solicitation.recipient_id),
        )
    except NotificationDispatchFailure as exc:
        logger.warning(
            "Solicitation dispatch failed",
            solicitation_id=str(solicitation.id),
            kind=solicitation.kind,
            box_id=str(solicitation.box_id),
            recipient_id=str(solicitation.recipient_id),
            error=exc.reason,
        )
        solicitation.mark_failed(exc.reason)
        return
    except Exception as exc:
        logger.error(
            "Solicitation adapter error",
            solicitation_id=str(solicitation.id),
            kind=solicitation.kind,
            box_id=str(solicitation.box_id),
            error=str(exc),
            exc_info=True,
        )
        solicitation.mark_failed(str(exc) or exc.__class__.__name__)
        return

    solicitation.mark_sent(message_id=message_id)
    logger.info(
        "Solicitation sent",
        solicitation_id=str(solicitation.id),
        kind=solicitation.kind,
        box_id=str(solicitation.box_id),
        recipient_id=str(solicitation.recipient_id),
    )


@pipeline.event_handler(part_of=Box)
class SolicitationHandler:
    """Records and dispatches solicitations for stage completions."""

    @handle(DesignCompleted)
    def on_design_completed(self, event: DesignCompleted) -> None:
        self._solicit(event)

    @handle(AssemblyCompleted)
    def on_assembly_completed(self, event: AssemblyCompleted) -> None:
        self._solicit(event)

    def _solicit(self, event) -> None:
        kind, recipient_id = solicitation_for(event)
        solicitation = Solicitation.record(
            kind=kind,
            box_id=str(event.box_id),
            recipient_id=recipient_id,
            source_event_type=event.__class__.__name__,
        )
        deliver(solicitation)
        current_domain.repository_for(Solicitation).add(solicitation)

        if SolicitationStatus(solicitation.status) == SolicitationStatus.FAILED:
            logger.info(
                "Solicitation queued for retry",
                solicitation_id=str(solicitation.id),
                retry_count=solicitation.retry_count,
            )
