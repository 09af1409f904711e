"""
SQLite store for family trees, members and relationship edges.

Tables:
- family_trees: one row per tree
- users: members, unique per (family_tree_id, user_id)
- relationships: directed RELATES_TO edges, unique per
  (family_tree_id, source_id, target_id)

Blocking sqlite3 calls run in a worker thread so the async
callers never block the event loop.
"""

import asyncio
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Optional

from family_tree.config import settings
from family_tree.graph.errors import StoreError
from family_tree.graph.models import FamilyTree, Member, RelationshipEdge, utc_now
from family_tree.graph.repository.base import EDITABLE_MEMBER_FIELDS, FamilyRepository

MEMBER_COLUMNS = "user_id, family_tree_id, name, email, status, profile_picture, my_relationship"

EDGE_QUERY = """
    SELECT r.source_id, r.target_id, r.relationship,
           s.name AS source_name, t.name AS target_name
    FROM relationships r
    JOIN users s ON s.family_tree_id = r.family_tree_id AND s.user_id = r.source_id
    JOIN users t ON t.family_tree_id = r.family_tree_id AND t.user_id = r.target_id
    WHERE r.family_tree_id = ?
"""


class SQLiteRepository(FamilyRepository):
    """FamilyRepository backed by a local SQLite file."""

    def __init__(self, db_path: str = None, timeout: float = None):
        self.db_path = db_path or settings.database.sqlite_path
        self.timeout = timeout if timeout is not None else settings.database.sqlite_timeout
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self):
        """Connection committed on success, rolled back on error, always closed."""
        with closing(self._connect()) as conn, conn:
            yield conn

    def _init_db(self):
        """Initialize tables and indexes."""
        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS family_trees (
                    family_tree_id TEXT PRIMARY KEY,
                    created_by TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    family_tree_id TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL DEFAULT '',
                    email TEXT,
                    status TEXT NOT NULL DEFAULT 'invited',
                    profile_picture TEXT,
                    my_relationship TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (family_tree_id, user_id)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS relationships (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    family_tree_id TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    target_id TEXT NOT NULL,
                    relationship TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (family_tree_id, source_id, target_id)
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_users_tree ON users(family_tree_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_rel_target ON relationships(family_tree_id, target_id)")

    async def _run(self, fn, *args):
        """Run a blocking call off the event loop, mapping sqlite errors."""
        try:
            return await asyncio.to_thread(fn, *args)
        except sqlite3.Error as e:
            raise StoreError(f"SQLite error: {e}") from e

    # =========================================================================
    # TREES
    # =========================================================================

    def _create_tree(self, tree: FamilyTree) -> Optional[FamilyTree]:
        try:
            with self._connection() as conn:
                conn.execute(
                    "INSERT INTO family_trees (family_tree_id, created_by, created_at) VALUES (?, ?, ?)",
                    (tree.family_tree_id, tree.created_by, tree.created_at),
                )
        except sqlite3.IntegrityError:
            return None
        return self._get_tree(tree.family_tree_id)

    def _get_tree(self, family_tree_id: str) -> Optional[FamilyTree]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM family_trees WHERE family_tree_id = ?", (family_tree_id,)
            ).fetchone()
            if row:
                return FamilyTree(row["family_tree_id"], row["created_by"], row["created_at"])
            return None

    async def create_tree(self, tree: FamilyTree) -> Optional[FamilyTree]:
        return await self._run(self._create_tree, tree)

    async def get_tree(self, family_tree_id: str) -> Optional[FamilyTree]:
        return await self._run(self._get_tree, family_tree_id)

    # =========================================================================
    # MEMBERS
    # =========================================================================

    def _add_member(self, member: Member) -> Optional[Member]:
        try:
            with self._connection() as conn:
                conn.execute(f"""
                    INSERT INTO users ({MEMBER_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    member.user_id, member.family_tree_id, member.name, member.email,
                    member.status, member.profile_picture, member.my_relationship,
                ))
        except sqlite3.IntegrityError:
            return None
        return self._find_member(member.family_tree_id, member.user_id)

    def _update_member(self, family_tree_id: str, user_id: str, fields: dict) -> Optional[Member]:
        updates = {k: v for k, v in fields.items() if k in EDITABLE_MEMBER_FIELDS}
        if updates:
            updates["updated_at"] = utc_now()
            set_clause = ", ".join(f"{k} = ?" for k in updates.keys())
            values = list(updates.values()) + [family_tree_id, user_id]
            with self._connection() as conn:
                conn.execute(
                    f"UPDATE users SET {set_clause} WHERE family_tree_id = ? AND user_id = ?",
                    values,
                )
        return self._find_member(family_tree_id, user_id)

    def _find_member(self, family_tree_id: str, user_id: str) -> Optional[Member]:
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT {MEMBER_COLUMNS} FROM users WHERE family_tree_id = ? AND user_id = ?",
                (family_tree_id, user_id),
            ).fetchone()
            return self._row_to_member(row) if row else None

    def _list_members(self, family_tree_id: str) -> list[Member]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {MEMBER_COLUMNS} FROM users WHERE family_tree_id = ? ORDER BY name, user_id",
                (family_tree_id,),
            ).fetchall()
            return [self._row_to_member(row) for row in rows]

    async def add_member(self, member: Member) -> Optional[Member]:
        return await self._run(self._add_member, member)

    async def update_member(self, family_tree_id: str, user_id: str, **fields) -> Optional[Member]:
        return await self._run(self._update_member, family_tree_id, user_id, fields)

    async def find_member(self, family_tree_id: str, user_id: str) -> Optional[Member]:
        return await self._run(self._find_member, family_tree_id, user_id)

    async def list_members(self, family_tree_id: str) -> list[Member]:
        return await self._run(self._list_members, family_tree_id)

    # =========================================================================
    # RELATIONSHIPS
    # =========================================================================

    def _find_edge(self, family_tree_id: str, source_id: str, target_id: str) -> Optional[RelationshipEdge]:
        with self._connection() as conn:
            row = conn.execute(
                EDGE_QUERY + " AND r.source_id = ? AND r.target_id = ?",
                (family_tree_id, source_id, target_id),
            ).fetchone()
            return self._row_to_edge(row, family_tree_id) if row else None

    def _replace_edge_pair(self, family_tree_id, user_id1, user_id2, label1, label2) -> int:
        conn = self._connect()
        try:
            # Write lock up front so concurrent replacements queue instead of interleaving
            conn.execute("BEGIN IMMEDIATE")
            found = conn.execute(
                "SELECT COUNT(*) FROM users WHERE family_tree_id = ? AND user_id IN (?, ?)",
                (family_tree_id, user_id1, user_id2),
            ).fetchone()[0]
            if found < 2:
                conn.rollback()
                return 0

            conn.execute("""
                DELETE FROM relationships
                WHERE family_tree_id = ?
                  AND ((source_id = ? AND target_id = ?) OR (source_id = ? AND target_id = ?))
            """, (family_tree_id, user_id1, user_id2, user_id2, user_id1))

            created = 0
            for source, target, label in ((user_id1, user_id2, label1), (user_id2, user_id1, label2)):
                cursor = conn.execute("""
                    INSERT INTO relationships (family_tree_id, source_id, target_id, relationship, created_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (family_tree_id, source, target, label, utc_now()))
                created += cursor.rowcount
            conn.commit()
            return created
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _list_edges(self, family_tree_id: str) -> list[RelationshipEdge]:
        with self._connection() as conn:
            rows = conn.execute(EDGE_QUERY + " ORDER BY r.id", (family_tree_id,)).fetchall()
            return [self._row_to_edge(row, family_tree_id) for row in rows]

    async def find_edge(self, family_tree_id: str, source_id: str, target_id: str) -> Optional[RelationshipEdge]:
        return await self._run(self._find_edge, family_tree_id, source_id, target_id)

    async def replace_edge_pair(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        label1: str,
        label2: str,
    ) -> int:
        return await self._run(self._replace_edge_pair, family_tree_id, user_id1, user_id2, label1, label2)

    async def list_edges(self, family_tree_id: str) -> list[RelationshipEdge]:
        return await self._run(self._list_edges, family_tree_id)

    # =========================================================================
    # ROW CONVERSION
    # =========================================================================

    def _row_to_member(self, row: sqlite3.Row) -> Member:
        return Member(
            user_id=row["user_id"],
            family_tree_id=row["family_tree_id"],
            name=row["name"] or "",
            email=row["email"],
            status=row["status"],
            profile_picture=row["profile_picture"],
            my_relationship=row["my_relationship"],
        )

    def _row_to_edge(self, row: sqlite3.Row, family_tree_id: str) -> RelationshipEdge:
        return RelationshipEdge(
            family_tree_id=family_tree_id,
            source_id=row["source_id"],
            target_id=row["target_id"],
            relationship=row["relationship"],
            source_name=row["source_name"],
            target_name=row["target_name"],
        )
