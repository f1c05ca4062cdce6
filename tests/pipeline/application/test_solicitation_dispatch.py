"""Application tests for SolicitationHandler — recruiting the next volunteer."""

from datetime import UTC, datetime

from box_builders import ASSEMBLER, DESIGNER, RESEARCHER
from pipeline.box.assembly import ClaimAssembly, CompleteAssembly
from pipeline.box.box import Box, BoxStatus
from pipeline.box.design import ClaimDesign, CompleteDesign
from pipeline.box.events import AssemblyCompleted, DesignCompleted
from pipeline.box.items import AddBoxItem
from pipeline.box.research import ClaimResearch, CompleteResearch
from pipeline.dispatcher import set_dispatcher
from pipeline.dispatcher.port import SolicitationDispatcherPort, SolicitationKind
from pipeline.solicitation.dispatch import SolicitationHandler
from pipeline.solicitation.solicitation import Solicitation, SolicitationStatus
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _solicitations(box_id):
    repo = current_domain.repository_for(Solicitation)
    return repo._dao.query.filter(box_id=box_id).all().items


class _BrokenDispatcher(SolicitationDispatcherPort):
    def dispatch(self, kind, box, actor_id):
        raise ConnectionError("mail relay unreachable")


def _design_completed(box_id, research_required=True):
    return DesignCompleted(
        box_id=box_id,
        designed_by=DESIGNER,
        research_required=research_required,
        status=BoxStatus.DESIGNED.value if research_required else BoxStatus.RESEARCHED.value,
        item_count=1,
        completed_at=datetime.now(UTC),
    )


class TestHandlerInvokedDirectly:
    def test_research_solicitation_to_designer(self, box_id, dispatcher):
        SolicitationHandler().on_design_completed(_design_completed(box_id))

        assert dispatcher.dispatched_of(SolicitationKind.RESEARCH) == [
            {
                "message_id": dispatcher.dispatched[0]["message_id"],
                "kind": "research_solicitation",
                "box_id": box_id,
                "actor_id": DESIGNER,
            }
        ]
        assert len(dispatcher.dispatched) == 1

    def test_assembly_solicitation_when_research_skipped(self, box_id, dispatcher):
        SolicitationHandler().on_design_completed(_design_completed(box_id, research_required=False))

        assert [d["kind"] for d in dispatcher.dispatched] == ["assembly_solicitation"]
        assert dispatcher.dispatched[0]["actor_id"] == DESIGNER

    def test_shipping_solicitation_to_assembler(self, box_id, dispatcher):
        SolicitationHandler().on_assembly_completed(
            AssemblyCompleted(box_id=box_id, assembled_by=ASSEMBLER, completed_at=datetime.now(UTC))
        )

        assert [(d["kind"], d["actor_id"]) for d in dispatcher.dispatched] == [("shipping_solicitation", ASSEMBLER)]

    def test_records_sent_solicitation(self, box_id, dispatcher):
        SolicitationHandler().on_design_completed(_design_completed(box_id))

        [solicitation] = _solicitations(box_id)
        assert solicitation.status == SolicitationStatus.SENT.value
        assert solicitation.message_id == dispatcher.dispatched[0]["message_id"]
        assert solicitation.source_event_type == "DesignCompleted"

    def test_dispatch_failure_is_recorded_not_raised(self, box_id, dispatcher):
        dispatcher.configure(should_succeed=False, failure_reason="SMTP down")

        SolicitationHandler().on_design_completed(_design_completed(box_id))

        [solicitation] = _solicitations(box_id)
        assert solicitation.status == SolicitationStatus.FAILED.value
        assert solicitation.failure_reason == "SMTP down"
        assert dispatcher.dispatched == []

    def test_unexpected_adapter_error_is_recorded(self, box_id):
        set_dispatcher(_BrokenDispatcher())

        SolicitationHandler().on_design_completed(_design_completed(box_id))

        [solicitation] = _solicitations(box_id)
        assert solicitation.status == SolicitationStatus.FAILED.value
        assert solicitation.failure_reason == "mail relay unreachable"

    def test_missing_box_marks_failed(self, dispatcher):
        SolicitationHandler().on_design_completed(_design_completed("no-such-box"))

        [solicitation] = _solicitations("no-such-box")
        assert solicitation.status == SolicitationStatus.FAILED.value
        assert dispatcher.dispatched == []


class TestSolicitationsFromCommands:
    def test_research_path_sends_research_then_shipping(self, box_id, research_type_id, dispatcher):
        _process(ClaimDesign(box_id=box_id, designed_by=DESIGNER))
        _process(AddBoxItem(box_id=box_id, inventory_type_id=research_type_id))
        _process(CompleteDesign(box_id=box_id))
        assert [d["kind"] for d in dispatcher.dispatched] == ["research_solicitation"]

        _process(ClaimResearch(box_id=box_id, researched_by=RESEARCHER))
        _process(CompleteResearch(box_id=box_id))
        _process(ClaimAssembly(box_id=box_id, assembled_by=ASSEMBLER))
        _process(CompleteAssembly(box_id=box_id))

        assert [(d["kind"], d["actor_id"]) for d in dispatcher.dispatched] == [
            ("research_solicitation", DESIGNER),
            ("shipping_solicitation", ASSEMBLER),
        ]

    def test_direct_path_sends_assembly_solicitation(self, box_id, plain_type_id, dispatcher):
        _process(ClaimDesign(box_id=box_id, designed_by=DESIGNER))
        _process(AddBoxItem(box_id=box_id, inventory_type_id=plain_type_id))
        _process(CompleteDesign(box_id=box_id))

        assert [(d["kind"], d["actor_id"]) for d in dispatcher.dispatched] == [("assembly_solicitation", DESIGNER)]

    def test_failed_dispatch_keeps_transition(self, box_id, research_type_id, dispatcher):
        dispatcher.configure(should_succeed=False)
        _process(ClaimDesign(box_id=box_id, designed_by=DESIGNER))
        _process(AddBoxItem(box_id=box_id, inventory_type_id=research_type_id))

        assert _process(CompleteDesign(box_id=box_id)) == BoxStatus.DESIGNED.value
        assert current_domain.repository_for(Box).get(box_id).status == BoxStatus.DESIGNED.value
        assert [s.status for s in _solicitations(box_id)] == [SolicitationStatus.FAILED.value]
