"""Solicitation dispatcher registry.

One process-wide adapter delivers every SolicitationKind; the solicitation
handler and RetrySolicitation both reach it through ``get_dispatcher``.
SOLICITATION_DISPATCHER names the built-in adapter to use. Deployments with
their own delivery channel install an adapter instance with
``set_dispatcher`` instead.
"""

import os

from pipeline.dispatcher.port import SolicitationDispatcherPort

BUILT_IN_DISPATCHERS = ("fake",)

_dispatcher_instance = None


def get_dispatcher() -> SolicitationDispatcherPort:
    """Return the active solicitation dispatcher, creating it on first use."""
    global _dispatcher_instance
    if _dispatcher_instance is None:
        adapter = os.environ.get("SOLICITATION_DISPATCHER", "fake")
        if adapter == "fake":
            from pipeline.dispatcher.fake_dispatcher import FakeDispatcher

            _dispatcher_instance = FakeDispatcher()
        else:
            raise ValueError(
                f"Unknown solicitation dispatcher {adapter!r}; expected one of {', '.join(BUILT_IN_DISPATCHERS)}"
            )
    return _dispatcher_instance


def set_dispatcher(dispatcher: SolicitationDispatcherPort) -> None:
    """Install ``dispatcher`` as the adapter for every solicitation."""
    global _dispatcher_instance
    if not isinstance(dispatcher, SolicitationDispatcherPort):
        raise TypeError(f"{type(dispatcher).__name__} does not implement SolicitationDispatcherPort")
    _dispatcher_instance = dispatcher


def reset_dispatcher():
    """Forget the active dispatcher; the next lookup reads the environment again."""
    global _dispatcher_instance
    _dispatcher_instance = None
