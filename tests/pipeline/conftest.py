import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from pipeline.dispatcher import get_dispatcher, reset_dispatcher


@pytest.fixture(scope="session")
def pipeline_bed():
    from pipeline.domain import pipeline

    bed = DomainFixture(pipeline)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(pipeline_bed):
    with pipeline_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()


@pytest.fixture(autouse=True)
def dispatcher():
    """A fresh recording dispatcher for every test."""
    reset_dispatcher()
    yield get_dispatcher()
    reset_dispatcher()
