"""SQLite storage implementation."""

import asyncio
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import RosterMember


class IStorage(Protocol):
    """Persistent storage for the roster and access-control data (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    def transaction(self) -> "AbstractAsyncContextManager[Transaction]":
        """Async context manager running its body as one atomic transaction."""
        ...

    # Roster
    async def list_members(self) -> list[RosterMember]:
        """Get all committee members."""
        ...

    async def increment_quiz_count(self, name: str) -> bool:
        """Count one more quiz about `name`. False if no such member."""
        ...

    # Admins
    async def is_admin(self, telegram_id: str) -> bool:
        """Check whether an identity belongs to an admin."""
        ...

    async def list_admins(self) -> list[str]:
        """Get the names of all admins."""
        ...

    async def insert_admin(self, telegram_id: str, name: str) -> None:
        """Register an admin."""
        ...

    # Authorizations
    async def is_authorized(self, chat_id: str, command: str) -> bool:
        """Check whether a chat may run a command."""
        ...

    async def list_authorized(self, chat_id: str) -> list[str]:
        """Get the command keys a chat may run."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Transaction:
    """Queries bound to a connection with an open transaction."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def _count(self, query: str, params: tuple) -> int:
        async with self._conn.execute(query, params) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else 0

    # Roster
    async def list_members(self) -> list[RosterMember]:
        async with self._conn.execute(
            "SELECT name, poll_count FROM committee ORDER BY rowid ASC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [RosterMember(name=row[0], poll_count=row[1]) for row in rows]

    async def increment_quiz_count(self, name: str) -> bool:
        cursor = await self._conn.execute(
            "UPDATE committee SET poll_count = poll_count + 1 WHERE name = ?",
            (name,),
        )
        return cursor.rowcount > 0

    async def insert_member(self, name: str) -> None:
        await self._conn.execute(
            "INSERT INTO committee (name) VALUES (?)",
            (name,),
        )

    async def delete_member(self, name: str) -> int:
        cursor = await self._conn.execute(
            "DELETE FROM committee WHERE name = ?",
            (name,),
        )
        return cursor.rowcount

    # Admins
    async def is_admin(self, telegram_id: str) -> bool:
        count = await self._count(
            "SELECT COUNT(*) FROM admins WHERE telegram_id = ?",
            (telegram_id,),
        )
        return count > 0

    async def list_admins(self) -> list[str]:
        async with self._conn.execute(
            "SELECT name FROM admins ORDER BY id ASC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def count_admins_named(self, name: str) -> int:
        return await self._count(
            "SELECT COUNT(*) FROM admins WHERE name = ?",
            (name,),
        )

    async def insert_admin(self, telegram_id: str, name: str) -> None:
        await self._conn.execute(
            "INSERT INTO admins (telegram_id, name) VALUES (?, ?)",
            (telegram_id, name),
        )

    async def delete_admin_by_name(self, name: str) -> int:
        cursor = await self._conn.execute(
            "DELETE FROM admins WHERE name = ?",
            (name,),
        )
        return cursor.rowcount

    # Authorizations
    async def is_authorized(self, chat_id: str, command: str) -> bool:
        count = await self._count(
            "SELECT COUNT(*) FROM authorizations WHERE chat_id = ? AND command = ?",
            (chat_id, command),
        )
        return count > 0

    async def list_authorized(self, chat_id: str) -> list[str]:
        async with self._conn.execute(
            "SELECT command FROM authorizations WHERE chat_id = ? ORDER BY id ASC",
            (chat_id,),
        ) as cursor:
            rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def insert_authorization(self, chat_id: str, command: str) -> None:
        await self._conn.execute(
            "INSERT INTO authorizations (chat_id, command) VALUES (?, ?)",
            (chat_id, command),
        )

    async def delete_authorization(self, chat_id: str, command: str) -> int:
        cursor = await self._conn.execute(
            "DELETE FROM authorizations WHERE chat_id = ? AND command = ?",
            (chat_id, command),
        )
        return cursor.rowcount

    async def clear(self) -> None:
        for table in ("admins", "authorizations", "committee"):
            await self._conn.execute(f"DELETE FROM {table}")


class Storage:
    """SQLite storage implementation.

    All statements go through one connection. Every access runs inside an
    explicit transaction taken under `_lock`, so the read-check-then-write
    sequence of one endpoint never interleaves with statements of another
    task.
    """

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def init(self) -> None:
        """Initialize database and create tables."""
        # autocommit mode: BEGIN/COMMIT are issued explicitly by transaction()
        self._conn = await aiosqlite.connect(self._db_path, isolation_level=None)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Run the body as one transaction, rolled back if it raises."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        async with self._lock:
            await self._conn.execute("BEGIN")
            try:
                yield Transaction(self._conn)
                await self._conn.execute("COMMIT")
            except BaseException:
                # a failed COMMIT can leave the transaction open
                if self._conn.in_transaction:
                    await self._conn.execute("ROLLBACK")
                raise

    # Roster
    async def list_members(self) -> list[RosterMember]:
        """Get all committee members."""
        async with self.transaction() as tx:
            return await tx.list_members()

    async def increment_quiz_count(self, name: str) -> bool:
        """Count one more quiz about `name`. False if no such member."""
        async with self.transaction() as tx:
            return await tx.increment_quiz_count(name)

    # Admins
    async def is_admin(self, telegram_id: str) -> bool:
        """Check whether an identity belongs to an admin."""
        async with self.transaction() as tx:
            return await tx.is_admin(telegram_id)

    async def list_admins(self) -> list[str]:
        """Get the names of all admins."""
        async with self.transaction() as tx:
            return await tx.list_admins()

    async def insert_admin(self, telegram_id: str, name: str) -> None:
        """Register an admin. Duplicates are not checked."""
        async with self.transaction() as tx:
            await tx.insert_admin(telegram_id, name)

    # Authorizations
    async def is_authorized(self, chat_id: str, command: str) -> bool:
        """Check whether a chat may run a command."""
        async with self.transaction() as tx:
            return await tx.is_authorized(chat_id, command)

    async def list_authorized(self, chat_id: str) -> list[str]:
        """Get the command keys a chat may run."""
        async with self.transaction() as tx:
            return await tx.list_authorized(chat_id)

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        async with self.transaction() as tx:
            await tx.clear()
