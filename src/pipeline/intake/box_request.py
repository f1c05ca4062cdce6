"""BoxRequest aggregate (CQRS) — intake of a request for a donation box.

A request is submitted on behalf of a requester, claimed by a reviewer and
then reviewed. Completing the review creates the request's one and only Box.

State Machine:
    SUBMITTED → REVIEW_CLAIMED → REVIEWED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text, ValueObject

from pipeline.box.box import Box
from pipeline.domain import pipeline
from pipeline.exceptions import GuardNotSatisfied, InvalidTransition
from pipeline.intake.events import BoxRequestSubmitted, ReviewClaimed, ReviewCompleted


class BoxRequestStatus(Enum):
    SUBMITTED = "submitted"
    REVIEW_CLAIMED = "review_claimed"
    REVIEWED = "reviewed"


# event -> (source, target)
_TRANSITIONS = {
    "claim_review": (BoxRequestStatus.SUBMITTED, BoxRequestStatus.REVIEW_CLAIMED),
    "complete_review": (BoxRequestStatus.REVIEW_CLAIMED, BoxRequestStatus.REVIEWED),
}


@pipeline.value_object(part_of="BoxRequest")
class Requester:
    """The person the box is for, and how they agreed to be contacted."""

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    email = String(max_length=254)
    phone = String(max_length=30)
    street_address = String(max_length=255)
    city = String(max_length=100)
    state_code = String(max_length=2)
    zip_code = String(max_length=10)
    ok_to_email = Boolean(default=False)
    ok_to_text = Boolean(default=False)
    ok_to_call = Boolean(default=False)
    ok_to_mail = Boolean(default=False)
    underage = Boolean(default=False)


@pipeline.aggregate
class BoxRequest:
    requester = ValueObject(Requester)
    summary = Text()
    question_re_affect = Text()
    question_re_current_situation = Text()
    question_re_referral_source = Text()
    status = String(
        choices=BoxRequestStatus,
        default=BoxRequestStatus.SUBMITTED.value,
    )
    reviewed_by = Identifier()
    reviewed_at = DateTime()
    box_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        requester: dict,
        summary: str | None = None,
        question_re_affect: str | None = None,
        question_re_current_situation: str | None = None,
        question_re_referral_source: str | None = None,
    ):
        now = datetime.now(UTC)
        request = cls(
            requester=Requester(**requester),
            summary=summary,
            question_re_affect=question_re_affect,
            question_re_current_situation=question_re_current_situation,
            question_re_referral_source=question_re_referral_source,
            status=BoxRequestStatus.SUBMITTED.value,
            created_at=now,
            updated_at=now,
        )
        request.raise_(
            BoxRequestSubmitted(
                box_request_id=str(request.id),
                requester_name=f"{requester['first_name']} {requester['last_name']}",
                submitted_at=now,
            )
        )
        return request

    # -------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------
    def _assert_source(self, event: str) -> BoxRequestStatus:
        source, target = _TRANSITIONS[event]
        current = BoxRequestStatus(self.status)
        if current != source:
            raise InvalidTransition(event, current.value, target.value)
        return target

    def claim_review(self) -> str:
        target = self._assert_source("claim_review")
        if not self.reviewed_by:
            raise GuardNotSatisfied("claim_review", "reviewed_by", "Assign a reviewer before claiming the review")

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            ReviewClaimed(
                box_request_id=str(self.id),
                reviewed_by=str(self.reviewed_by),
                claimed_at=now,
            )
        )
        return self.status

    def complete_review(self) -> Box:
        """Mark the request reviewed and create its box.

        The caller persists the returned box alongside the request.
        """
        target = self._assert_source("complete_review")

        now = datetime.now(UTC)
        box = Box.create(box_request_id=str(self.id))
        self.box_id = str(box.id)
        self.status = target.value
        self.reviewed_at = now
        self.updated_at = now
        self.raise_(
            ReviewCompleted(
                box_request_id=str(self.id),
                box_id=self.box_id,
                reviewed_by=str(self.reviewed_by),
                reviewed_at=now,
            )
        )
        return box
