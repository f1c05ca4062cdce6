"""Box aggregate (CQRS) — the core of the pipeline domain.

A Box is created when its box request passes review and is then carried
through design, item research, assembly, shipping and follow-up. Each stage
is claimed by a named volunteer and later completed.

State Machine:
    REVIEWED → DESIGN_IN_PROGRESS → DESIGNED → RESEARCH_IN_PROGRESS → RESEARCHED
    DESIGN_IN_PROGRESS → RESEARCHED  (no item needs research)
    RESEARCHED → ASSEMBLY_IN_PROGRESS → ASSEMBLED → SHIPPING_IN_PROGRESS → SHIPPED
    SHIPPED → FOLLOW_UP_IN_PROGRESS → FOLLOWED_UP
"""

from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from pipeline.box.events import (
    AssemblyClaimed,
    AssemblyCompleted,
    BoxCreated,
    BoxItemAdded,
    DesignClaimed,
    DesignCompleted,
    FollowUpClaimed,
    FollowUpCompleted,
    ResearchClaimed,
    ResearchCompleted,
    ShippingClaimed,
    ShippingCompleted,
)
from pipeline.domain import pipeline
from pipeline.exceptions import GuardNotSatisfied, InvalidTransition


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class BoxStatus(Enum):
    REVIEWED = "reviewed"
    DESIGN_IN_PROGRESS = "design_in_progress"
    DESIGNED = "designed"
    RESEARCH_IN_PROGRESS = "research_in_progress"
    RESEARCHED = "researched"
    ASSEMBLY_IN_PROGRESS = "assembly_in_progress"
    ASSEMBLED = "assembled"
    SHIPPING_IN_PROGRESS = "shipping_in_progress"
    SHIPPED = "shipped"
    FOLLOW_UP_IN_PROGRESS = "follow_up_in_progress"
    FOLLOWED_UP = "followed_up"


class BoxStage(Enum):
    DESIGN = "design"
    RESEARCH = "research"
    ASSEMBLY = "assembly"
    SHIPPING = "shipping"
    FOLLOW_UP = "follow_up"


# Actor reference each stage's claim requires
STAGE_ACTOR_FIELDS = {
    BoxStage.DESIGN: "designed_by",
    BoxStage.RESEARCH: "researched_by",
    BoxStage.ASSEMBLY: "assembled_by",
    BoxStage.SHIPPING: "shipped_by",
    BoxStage.FOLLOW_UP: "followed_up_by",
}

_ITEM_EDITABLE_STATUSES = {BoxStatus.REVIEWED, BoxStatus.DESIGN_IN_PROGRESS}


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------
def _actor_assigned(stage: BoxStage) -> Callable[["Box"], tuple[str, str] | None]:
    field_name = STAGE_ACTOR_FIELDS[stage]

    def guard(box: "Box") -> tuple[str, str] | None:
        if not getattr(box, field_name):
            return field_name, f"Assign a {stage.value.replace('_', ' ')} volunteer before claiming the stage"
        return None

    return guard


def _has_items(box: "Box") -> tuple[str, str] | None:
    if not box.items:
        return "items", "Add at least one item before completing the design"
    return None


class Transition(NamedTuple):
    source: BoxStatus
    targets: tuple[BoxStatus, ...]
    guard: Callable[["Box"], tuple[str, str] | None] | None = None


TRANSITIONS: dict[str, Transition] = {
    "claim_design": Transition(
        BoxStatus.REVIEWED, (BoxStatus.DESIGN_IN_PROGRESS,), _actor_assigned(BoxStage.DESIGN)
    ),
    # Forks on the research predicate; both branches rejoin at RESEARCHED
    "complete_design": Transition(
        BoxStatus.DESIGN_IN_PROGRESS, (BoxStatus.DESIGNED, BoxStatus.RESEARCHED), _has_items
    ),
    "claim_research": Transition(
        BoxStatus.DESIGNED, (BoxStatus.RESEARCH_IN_PROGRESS,), _actor_assigned(BoxStage.RESEARCH)
    ),
    "complete_research": Transition(BoxStatus.RESEARCH_IN_PROGRESS, (BoxStatus.RESEARCHED,)),
    "claim_assembly": Transition(
        BoxStatus.RESEARCHED, (BoxStatus.ASSEMBLY_IN_PROGRESS,), _actor_assigned(BoxStage.ASSEMBLY)
    ),
    "complete_assembly": Transition(BoxStatus.ASSEMBLY_IN_PROGRESS, (BoxStatus.ASSEMBLED,)),
    "claim_shipping": Transition(
        BoxStatus.ASSEMBLED, (BoxStatus.SHIPPING_IN_PROGRESS,), _actor_assigned(BoxStage.SHIPPING)
    ),
    "complete_shipping": Transition(BoxStatus.SHIPPING_IN_PROGRESS, (BoxStatus.SHIPPED,)),
    "claim_follow_up": Transition(
        BoxStatus.SHIPPED, (BoxStatus.FOLLOW_UP_IN_PROGRESS,), _actor_assigned(BoxStage.FOLLOW_UP)
    ),
    "complete_follow_up": Transition(BoxStatus.FOLLOW_UP_IN_PROGRESS, (BoxStatus.FOLLOWED_UP,)),
}


def events_from(status: BoxStatus) -> list[str]:
    """Return the events that may fire while a box is in ``status``."""
    return [event for event, transition in TRANSITIONS.items() if transition.source == status]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@pipeline.entity(part_of="Box")
class BoxItem:
    """An item placed in a box. Only research completion touches it afterwards."""

    inventory_type_id = Identifier(required=True)
    inventory_type_name = String(max_length=200)
    requires_research = Boolean(default=False)
    researched_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@pipeline.aggregate
class Box:
    box_request_id = Identifier(required=True)
    status = String(
        choices=BoxStatus,
        default=BoxStatus.REVIEWED.value,
    )
    designed_by = Identifier()
    researched_by = Identifier()
    assembled_by = Identifier()
    shipped_by = Identifier()
    followed_up_by = Identifier()
    researched_at = DateTime()
    items = HasMany(BoxItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, box_request_id: str):
        """Create a box for a request that has just passed review."""
        now = datetime.now(UTC)
        box = cls(
            box_request_id=box_request_id,
            status=BoxStatus.REVIEWED.value,
            created_at=now,
            updated_at=now,
        )
        box.raise_(
            BoxCreated(
                box_id=str(box.id),
                box_request_id=str(box_request_id),
                created_at=now,
            )
        )
        return box

    # -------------------------------------------------------------------
    # Transition helpers
    # -------------------------------------------------------------------
    def _check(self, event: str) -> Transition:
        """Reject ``event`` unless the box is in its source state and the guard holds."""
        transition = TRANSITIONS[event]
        current = BoxStatus(self.status)
        if current != transition.source:
            raise InvalidTransition(event, current.value, " or ".join(t.value for t in transition.targets))

        if transition.guard is not None:
            failure = transition.guard(self)
            if failure is not None:
                field_name, message = failure
                raise GuardNotSatisfied(event, field_name, message)
        return transition

    def _advance(self, target: BoxStatus, now: datetime) -> str:
        self.status = target.value
        self.updated_at = now
        return self.status

    def assign_actor(self, stage: BoxStage | str, actor_id: str) -> None:
        """Name the volunteer responsible for a stage, ahead of claiming it."""
        field_name = STAGE_ACTOR_FIELDS[BoxStage(stage)]
        setattr(self, field_name, actor_id)

    # -------------------------------------------------------------------
    # Items and the research predicate
    # -------------------------------------------------------------------
    def add_item(self, inventory_type) -> BoxItem:
        """Place an item of ``inventory_type`` in the box during design."""
        current = BoxStatus(self.status)
        if current not in _ITEM_EDITABLE_STATUSES:
            raise GuardNotSatisfied(
                "add_item",
                "status",
                f"Items can only be added while the box is reviewed or in design, not {current.value}",
            )

        item = BoxItem(
            inventory_type_id=str(inventory_type.id),
            inventory_type_name=inventory_type.name,
            requires_research=bool(inventory_type.requires_research),
        )
        self.add_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            BoxItemAdded(
                box_id=str(self.id),
                item_id=str(item.id),
                inventory_type_id=str(inventory_type.id),
                requires_research=item.requires_research,
            )
        )
        return item

    def requires_research(self, research_flags: dict[str, bool] | None = None) -> bool:
        """True if any item's inventory type requires research.

        ``research_flags`` maps inventory type ids to their current flag and
        takes precedence over the flag copied onto each item.
        """
        for item in self.items or []:
            flag = item.requires_research
            if research_flags is not None:
                flag = research_flags.get(str(item.inventory_type_id), flag)
            if flag:
                return True
        return False

    # -------------------------------------------------------------------
    # Design
    # -------------------------------------------------------------------
    def claim_design(self) -> str:
        transition = self._check("claim_design")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(DesignClaimed(box_id=str(self.id), designed_by=str(self.designed_by), claimed_at=now))
        return status

    def complete_design(self, research_flags: dict[str, bool] | None = None) -> str:
        """Finish the design, skipping the research stage when nothing needs it."""
        transition = self._check("complete_design")
        research_required = self.requires_research(research_flags)
        designed, researched = transition.targets

        now = datetime.now(UTC)
        status = self._advance(designed if research_required else researched, now)
        self.raise_(
            DesignCompleted(
                box_id=str(self.id),
                designed_by=str(self.designed_by),
                research_required=research_required,
                status=status,
                item_count=len(self.items or []),
                completed_at=now,
            )
        )
        return status

    # -------------------------------------------------------------------
    # Research
    # -------------------------------------------------------------------
    def claim_research(self) -> str:
        transition = self._check("claim_research")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(ResearchClaimed(box_id=str(self.id), researched_by=str(self.researched_by), claimed_at=now))
        return status

    def complete_research(self, *, researched_at: datetime | None = None) -> str:
        """Finish research and stamp the box and every item with the time.

        The stamp is the moment the transition runs. ``researched_at`` only
        stands in for the clock, so tests can pin the time.
        """
        transition = self._check("complete_research")
        now = researched_at or datetime.now(UTC)

        for item in self.items or []:
            item.researched_at = now
        self.researched_at = now
        status = self._advance(transition.targets[0], now)
        self.raise_(
            ResearchCompleted(
                box_id=str(self.id),
                researched_by=str(self.researched_by),
                item_count=len(self.items or []),
                researched_at=now,
            )
        )
        return status

    # -------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------
    def claim_assembly(self) -> str:
        transition = self._check("claim_assembly")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(AssemblyClaimed(box_id=str(self.id), assembled_by=str(self.assembled_by), claimed_at=now))
        return status

    def complete_assembly(self) -> str:
        transition = self._check("complete_assembly")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(AssemblyCompleted(box_id=str(self.id), assembled_by=str(self.assembled_by), completed_at=now))
        return status

    # -------------------------------------------------------------------
    # Shipping
    # -------------------------------------------------------------------
    def claim_shipping(self) -> str:
        transition = self._check("claim_shipping")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(ShippingClaimed(box_id=str(self.id), shipped_by=str(self.shipped_by), claimed_at=now))
        return status

    def complete_shipping(self) -> str:
        transition = self._check("complete_shipping")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(ShippingCompleted(box_id=str(self.id), shipped_by=str(self.shipped_by), shipped_at=now))
        return status

    # -------------------------------------------------------------------
    # Follow-up
    # -------------------------------------------------------------------
    def claim_follow_up(self) -> str:
        transition = self._check("claim_follow_up")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(
            FollowUpClaimed(box_id=str(self.id), followed_up_by=str(self.followed_up_by), claimed_at=now)
        )
        return status

    def complete_follow_up(self) -> str:
        transition = self._check("complete_follow_up")
        now = datetime.now(UTC)
        status = self._advance(transition.targets[0], now)
        self.raise_(
            FollowUpCompleted(box_id=str(self.id), followed_up_by=str(self.followed_up_by), completed_at=now)
        )
        return status
