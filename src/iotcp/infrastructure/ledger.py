"""SQLite-backed local ledger stub.

Each :class:`SqlStub` serves one call. Reads see the committed world
state overlaid with the call's own pending writes. Writes are buffered in
a write set and only reach the database through :meth:`SqlStub.commit`,
which the caller invokes once the call's outcome is known. Published
events are recorded regardless of outcome so failures remain observable.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select

from iotcp.infrastructure.database.schema import chaincode_events, world_state

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_DELETED = object()


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


class SqlStub:
    """A :class:`~iotcp.domain.ledger.LedgerStub` over a SQLite database."""

    def __init__(
        self,
        engine: Engine,
        function: str,
        args: list[str],
        *,
        txid: str | None = None,
    ) -> None:
        self._engine = engine
        self._function = function
        self._args = list(args)
        self.txid = txid or uuid.uuid4().hex
        self._writes: dict[str, Any] = {}
        self._events: list[tuple[str, bytes]] = []
        self._committed = False

    def get_state(self, key: str) -> bytes | None:
        if key in self._writes:
            pending = self._writes[key]
            return None if pending is _DELETED else pending
        with self._engine.connect() as conn:
            return conn.execute(
                select(world_state.c.value).where(world_state.c.key == key)
            ).scalar_one_or_none()

    def put_state(self, key: str, value: bytes) -> None:
        self._writes[key] = value

    def del_state(self, key: str) -> None:
        self._writes[key] = _DELETED

    def get_function_and_args(self) -> tuple[str, list[str]]:
        return self._function, list(self._args)

    def get_string_args(self) -> list[str]:
        return [self._function, *self._args]

    def set_event(self, name: str, payload: bytes) -> None:
        self._events.append((name, payload))

    def commit(self, *, write_state: bool) -> int:
        """Persist events and, if *write_state*, the pending write set.

        Returns the number of state keys written. A stub commits once.
        """
        if self._committed:
            msg = f"transaction {self.txid} already committed"
            raise RuntimeError(msg)
        self._committed = True
        now = _now_iso()
        written = 0
        with self._engine.begin() as conn:
            if write_state:
                for key, value in self._writes.items():
                    conn.execute(delete(world_state).where(world_state.c.key == key))
                    if value is not _DELETED:
                        conn.execute(
                            insert(world_state).values(
                                key=key, value=value, txid=self.txid, modified=now
                            )
                        )
                    written += 1
            for name, payload in self._events:
                conn.execute(
                    insert(chaincode_events).values(
                        txid=self.txid,
                        function=self._function,
                        name=name,
                        payload=payload.decode("utf-8"),
                        created=now,
                    )
                )
        logger.debug(
            "Committed tx %s: %d state writes, %d events", self.txid, written, len(self._events)
        )
        return written


def recent_events(engine: Engine, *, limit: int = 20) -> list[dict[str, Any]]:
    """Return the most recent recorded events, newest first."""
    with engine.connect() as conn:
        rows = conn.execute(
            select(chaincode_events).order_by(chaincode_events.c.id.desc()).limit(limit)
        ).fetchall()
    return [
        {
            "id": row.id,
            "txid": row.txid,
            "function": row.function,
            "name": row.name,
            "payload": json.loads(row.payload),
            "created": row.created,
        }
        for row in rows
    ]
