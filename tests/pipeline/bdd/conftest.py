"""Shared BDD fixtures and step definitions for the box pipeline."""

import pytest
from box_builders import (
    REQUESTER,
    box_in_design,
    clear_events,
    researched_box,
)
from pipeline.box.events import (
    AssemblyCompleted,
    DesignCompleted,
    FollowUpCompleted,
    ResearchCompleted,
    ShippingCompleted,
)
from pipeline.intake.box_request import BoxRequest
from pipeline.intake.events import BoxRequestSubmitted, ReviewClaimed, ReviewCompleted
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_BOX_EVENT_CLASSES = {
    "DesignCompleted": DesignCompleted,
    "ResearchCompleted": ResearchCompleted,
    "AssemblyCompleted": AssemblyCompleted,
    "ShippingCompleted": ShippingCompleted,
    "FollowUpCompleted": FollowUpCompleted,
}

_REQUEST_EVENT_CLASSES = {
    "BoxRequestSubmitted": BoxRequestSubmitted,
    "ReviewClaimed": ReviewClaimed,
    "ReviewCompleted": ReviewCompleted,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a submitted box request", target_fixture="box_request")
def submitted_request():
    return clear_events(BoxRequest.submit(requester=REQUESTER, summary="Needs a care package."))


@given("a box in design", target_fixture="box")
def a_box_in_design():
    return clear_events(box_in_design())


@given("a researched box", target_fixture="box")
def a_researched_box():
    return clear_events(researched_box())


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the box status is "{status}"'))
def box_status_is(box, status):
    assert box.status == status


@then(parsers.cfparse('the request status is "{status}"'))
def box_requeststatus_is(box_request, status):
    assert box_request.status == status


@then(parsers.cfparse("a {event_type} box event is raised"))
def box_event_raised(box, event_type):
    event_cls = _BOX_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in box._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in box._events]}"


@then(parsers.cfparse("a {event_type} request event is raised"))
def box_requestevent_raised(box_request, event_type):
    event_cls = _REQUEST_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in box_request._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in box_request._events]}"


