"""In-process ledger stub backed by plain dicts."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class MemoryStub:
    """A :class:`~iotcp.domain.ledger.LedgerStub` holding state in memory.

    ``function`` and ``args`` describe the call being served; ``state``
    may be shared between stubs to simulate successive transactions.
    Published events are appended to ``events`` as ``(name, payload)``.
    """

    function: str = ""
    args: list[str] = field(default_factory=list)
    state: dict[str, bytes] = field(default_factory=dict)
    events: list[tuple[str, bytes]] = field(default_factory=list)

    def get_state(self, key: str) -> bytes | None:
        return self.state.get(key)

    def put_state(self, key: str, value: bytes) -> None:
        self.state[key] = value

    def del_state(self, key: str) -> None:
        self.state.pop(key, None)

    def get_function_and_args(self) -> tuple[str, list[str]]:
        return self.function, list(self.args)

    def get_string_args(self) -> list[str]:
        return [self.function, *self.args]

    def set_event(self, name: str, payload: bytes) -> None:
        self.events.append((name, payload))
