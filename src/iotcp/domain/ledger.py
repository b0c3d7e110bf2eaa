"""The ledger capability consumed by handlers and the dispatcher.

The ledger itself lives outside this package. Everything here talks to it
through :class:`LedgerStub`, an opaque per-call handle that exposes world
state access, the raw call arguments, and event publication.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LedgerStub(Protocol):
    """Per-invocation handle onto the ledger."""

    def get_state(self, key: str) -> bytes | None:
        """Return the stored value for *key*, or None if absent."""
        ...

    def put_state(self, key: str, value: bytes) -> None:
        """Write *value* under *key* in this call's write set."""
        ...

    def del_state(self, key: str) -> None:
        """Delete *key* in this call's write set."""
        ...

    def get_function_and_args(self) -> tuple[str, list[str]]:
        """Return the invoked function name and its argument list."""
        ...

    def get_string_args(self) -> list[str]:
        """Return ``[function, *args]`` exactly as received."""
        ...

    def set_event(self, name: str, payload: bytes) -> None:
        """Publish a named event for this call."""
        ...
