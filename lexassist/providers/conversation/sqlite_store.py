"""SQLite-backed conversation history.

Each turn is one row, ordered by an autoincrement id, so history survives
restarts and several worker processes can share one database file.  Uses
sync ``sqlite3``: every operation touches a handful of short rows.

Sessions whose newest turn is older than ``max_age_hours`` are pruned on
:meth:`initialize`.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import structlog

from lexassist.interfaces.conversation_store import IConversationStore
from lexassist.models.conversation import ConversationTurn
from lexassist.utils.logging import get_logger

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT    NOT NULL,
    role       TEXT    NOT NULL,
    content    TEXT    NOT NULL,
    created_at TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_{table}_session ON {table}(session_id, id);"
)

_INSERT_SQL = "INSERT INTO {table} (session_id, role, content) VALUES (?, ?, ?);"

_SELECT_SQL = "SELECT role, content FROM {table} WHERE session_id = ? ORDER BY id;"

_DELETE_SQL = "DELETE FROM {table} WHERE session_id = ?;"

_COUNT_SESSIONS_SQL = "SELECT COUNT(DISTINCT session_id) FROM {table};"

_PRUNE_SQL = """\
DELETE FROM {table}
WHERE session_id IN (
    SELECT session_id FROM {table}
    GROUP BY session_id
    HAVING MAX(created_at) < strftime('%Y-%m-%dT%H:%M:%fZ', 'now', '-{hours} hours')
);
"""


class SQLiteConversationStore(IConversationStore):
    """Conversation store persisted to a SQLite file.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    table_name:
        Table holding the turns.
    max_age_hours:
        Sessions idle for longer than this are pruned on :meth:`initialize`.
        Set to ``0`` to disable pruning.
    """

    def __init__(
        self,
        db_path: str | Path,
        table_name: str = "conversation_turns",
        max_age_hours: int = 72,
    ) -> None:
        self._db_path = Path(db_path)
        self._table = table_name
        self._max_age_hours = max_age_hours
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the table and index, then prune idle sessions.

        Must be called once before use (typically during app startup).
        """
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(_CREATE_TABLE_SQL.format(table=self._table))
            conn.execute(_CREATE_INDEX_SQL.format(table=self._table))
            if self._max_age_hours > 0:
                cursor = conn.execute(
                    _PRUNE_SQL.format(table=self._table, hours=int(self._max_age_hours))
                )
                if cursor.rowcount:
                    self._logger.info(
                        "conversation_turns_pruned",
                        table=self._table,
                        pruned=cursor.rowcount,
                        max_age_hours=self._max_age_hours,
                    )
            conn.commit()
        finally:
            conn.close()

        self._logger.info(
            "conversation_store_initialized",
            db_path=str(self._db_path),
            table=self._table,
            existing_sessions=self.session_count(),
        )

    # ------------------------------------------------------------------
    # IConversationStore implementation
    # ------------------------------------------------------------------

    def get(self, session_id: str) -> list[ConversationTurn]:
        conn = self._connect()
        try:
            rows = conn.execute(_SELECT_SQL.format(table=self._table), (session_id,)).fetchall()
        finally:
            conn.close()
        return [ConversationTurn(role=role, content=content) for role, content in rows]

    def append(self, session_id: str, *turns: ConversationTurn) -> None:
        """Insert all *turns* in one transaction."""
        if not turns:
            return
        conn = self._connect()
        try:
            conn.executemany(
                _INSERT_SQL.format(table=self._table),
                [(session_id, turn.role, turn.content) for turn in turns],
            )
            conn.commit()
        finally:
            conn.close()

    def clear(self, session_id: str) -> None:
        conn = self._connect()
        try:
            conn.execute(_DELETE_SQL.format(table=self._table), (session_id,))
            conn.commit()
        finally:
            conn.close()

    def session_count(self) -> int:
        conn = self._connect()
        try:
            row = conn.execute(_COUNT_SESSIONS_SQL.format(table=self._table)).fetchone()
            return row[0] if row else 0
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        """Open a new connection in WAL mode so readers don't block the writer."""
        conn = sqlite3.connect(str(self._db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def get_provider_name(self) -> str:
        return f"sqlite_conversation_store:{self._table}"
