"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import apple_events_mcp

    assert apple_events_mcp.__version__ == "1.0.0"


def test_cli_entrypoint() -> None:
    from apple_events_mcp.cli import main

    assert callable(main)


def test_lazy_exports() -> None:
    import apple_events_mcp

    assert apple_events_mcp.MCPDispatcher is not None
    assert apple_events_mcp.InMemoryEventStore is not None


def test_backend_protocol() -> None:
    from apple_events_mcp.backend import EventsBackend, InMemoryEventStore

    assert isinstance(InMemoryEventStore(), EventsBackend)
