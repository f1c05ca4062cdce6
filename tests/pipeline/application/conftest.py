"""Shared setup for command-level tests: a reviewed box in the repository."""

import json

import pytest
from box_builders import REQUESTER, REVIEWER
from pipeline.intake.review import ClaimReview, CompleteReview
from pipeline.intake.submission import SubmitBoxRequest
from pipeline.inventory.registration import RegisterInventoryType
from protean import current_domain


@pytest.fixture()
def box_id():
    request_id = current_domain.process(SubmitBoxRequest(requester=json.dumps(REQUESTER)), asynchronous=False)
    current_domain.process(ClaimReview(box_request_id=request_id, reviewed_by=REVIEWER), asynchronous=False)
    return current_domain.process(CompleteReview(box_request_id=request_id), asynchronous=False)


@pytest.fixture()
def research_type_id():
    return current_domain.process(
        RegisterInventoryType(name="Journal", requires_research=True),
        asynchronous=False,
    )


@pytest.fixture()
def plain_type_id():
    return current_domain.process(
        RegisterInventoryType(name="Blanket", requires_research=False),
        asynchronous=False,
    )
