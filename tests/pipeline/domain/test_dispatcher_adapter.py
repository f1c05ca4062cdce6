"""Tests for the solicitation dispatcher abstraction."""

import pytest
from pipeline.dispatcher import get_dispatcher, reset_dispatcher, set_dispatcher
from pipeline.dispatcher.fake_dispatcher import FakeDispatcher
from pipeline.dispatcher.port import SolicitationKind
from pipeline.exceptions import NotificationDispatchFailure


class _Box:
    id = "box-1"


class TestFakeDispatcher:
    def test_records_dispatch(self):
        dispatcher = FakeDispatcher()
        message_id = dispatcher.dispatch(SolicitationKind.RESEARCH, _Box(), "vol-1")

        assert message_id.startswith("solicitation-")
        assert dispatcher.dispatched == [
            {
                "message_id": message_id,
                "kind": "research_solicitation",
                "box_id": "box-1",
                "actor_id": "vol-1",
            }
        ]

    def test_failure_raises(self):
        dispatcher = FakeDispatcher()
        dispatcher.configure(should_succeed=False, failure_reason="SMTP down")
        with pytest.raises(NotificationDispatchFailure) as exc:
            dispatcher.dispatch(SolicitationKind.SHIPPING, _Box(), "vol-2")
        assert exc.value.reason == "SMTP down"
        assert exc.value.kind == "shipping_solicitation"
        assert dispatcher.dispatched == []

    def test_dispatched_of_filters_by_kind(self):
        dispatcher = FakeDispatcher()
        dispatcher.dispatch(SolicitationKind.RESEARCH, _Box(), "vol-1")
        dispatcher.dispatch(SolicitationKind.ASSEMBLY, _Box(), "vol-1")
        assert len(dispatcher.dispatched_of(SolicitationKind.ASSEMBLY)) == 1

    def test_reset(self):
        dispatcher = FakeDispatcher()
        dispatcher.configure(should_succeed=False)
        dispatcher.reset()
        assert dispatcher.should_succeed is True


class TestRegistry:
    def test_fake_is_default(self, monkeypatch):
        monkeypatch.delenv("SOLICITATION_DISPATCHER", raising=False)
        reset_dispatcher()
        assert isinstance(get_dispatcher(), FakeDispatcher)

    def test_singleton(self):
        assert get_dispatcher() is get_dispatcher()

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("SOLICITATION_DISPATCHER", "carrier-pigeon")
        reset_dispatcher()
        with pytest.raises(ValueError):
            get_dispatcher()
        reset_dispatcher()

    def test_unknown_adapter_names_built_ins(self, monkeypatch):
        monkeypatch.setenv("SOLICITATION_DISPATCHER", "carrier-pigeon")
        reset_dispatcher()
        with pytest.raises(ValueError, match="fake"):
            get_dispatcher()
        reset_dispatcher()

    def test_installed_adapter_is_used(self):
        adapter = FakeDispatcher()
        set_dispatcher(adapter)
        assert get_dispatcher() is adapter
        reset_dispatcher()

    def test_install_rejects_non_adapter(self):
        with pytest.raises(TypeError):
            set_dispatcher(object())
