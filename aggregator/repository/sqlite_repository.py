"""
SQLite implementation of the network repository.

This module provides one concrete class that plays all three storage
collaborators of a sync job: the tenant directory, the per-tenant
document store and the network-wide options.
"""

from __future__ import annotations

from datetime import datetime
import logging
import os
import sqlite3
from typing import Any, List, Optional, Sequence

from dateutil.parser import isoparse
from dateutil.tz import tzutc
import simplejson as json

from aggregator.domain import Document, Tenant, Term

from .errors import DocumentNotFoundError, TenantContextError, UnknownTenantError
from .interface import DocumentStore, NetworkOptions, TenantDirectory

LOG = logging.getLogger(__name__)


def utcNow() -> datetime:
    return datetime.now(tzutc())


def slugify(name: str) -> str:
    return "-".join(name.lower().split())


class SqliteNetworkRepository(TenantDirectory, DocumentStore, NetworkOptions):
    """
    SQLite-backed network of tenants.

    Document rows carry the tenant they belong to and every document
    query is filtered on the active tenant. The active tenant is kept as
    a stack of switched-into tenants above the home tenant.
    """

    def __init__(self, db_path: str, home_tenant_id: int = 1):
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file
            home_tenant_id: Tenant that is active when nothing is switched
        """
        self.db_path = db_path
        self.home_tenant_id = home_tenant_id
        self._stack: List[int] = []
        self._ensure_db_dir()
        self._conn: Optional[sqlite3.Connection] = None
        self._init_schema()

    def _ensure_db_dir(self):
        """Create database directory if it doesn't exist."""
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection, creating if needed."""
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self):
        """Create database schema if it doesn't exist."""
        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS tenants (
                id INTEGER PRIMARY KEY,
                domain TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                tenant_id INTEGER NOT NULL,
                kind TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT '',
                created TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS document_meta (
                document_id INTEGER NOT NULL,
                key TEXT NOT NULL,
                value_json TEXT,
                PRIMARY KEY (document_id, key)
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS terms (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                tenant_id INTEGER NOT NULL,
                taxonomy TEXT NOT NULL,
                name TEXT NOT NULL,
                slug TEXT NOT NULL,
                UNIQUE (tenant_id, taxonomy, slug)
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS term_relationships (
                document_id INTEGER NOT NULL,
                term_id INTEGER NOT NULL,
                position INTEGER NOT NULL,
                PRIMARY KEY (document_id, term_id)
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS network_options (
                key TEXT PRIMARY KEY,
                value_json TEXT
            )
        """)

        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_documents_tenant_kind "
            "ON documents(tenant_id, kind)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_document_meta_key "
            "ON document_meta(key, value_json)")

        conn.commit()

    # Tenant directory

    def add_tenant(self, tenant_id: int, domain: str) -> Tenant:
        """Register a tenant, replacing the domain if it already exists."""
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO tenants (id, domain) VALUES (?, ?)",
            (tenant_id, domain))
        conn.commit()
        LOG.debug("added tenant %d (%s)", tenant_id, domain)
        return Tenant(id=tenant_id, domain=domain)

    def list_tenants(self) -> List[Tenant]:
        cursor = self._get_conn().execute("SELECT id, domain FROM tenants ORDER BY id")
        return [Tenant(id=row["id"], domain=row["domain"]) for row in cursor]

    def resolve(self, tenant_id: int) -> Optional[Tenant]:
        row = self._get_conn().execute(
            "SELECT id, domain FROM tenants WHERE id = ?", (tenant_id,)).fetchone()
        if row is None:
            return None
        return Tenant(id=row["id"], domain=row["domain"])

    def current_tenant_id(self) -> int:
        return self._stack[-1] if self._stack else self.home_tenant_id

    def switch_to(self, tenant_id: int) -> None:
        if self.resolve(tenant_id) is None:
            raise UnknownTenantError("No tenant with ID {}".format(tenant_id))
        self._stack.append(tenant_id)
        LOG.debug("switched to tenant %d (depth %d)", tenant_id, len(self._stack))

    def switch_back(self) -> None:
        if not self._stack:
            raise TenantContextError("No tenant switch to return from")
        left = self._stack.pop()
        LOG.debug("left tenant %d for %d", left, self.current_tenant_id())

    # Document store

    def _row_to_document(self, row: sqlite3.Row) -> Document:
        return Document(
            id=row["id"],
            kind=row["kind"],
            title=row["title"],
            created=isoparse(row["created"]) if row["created"] else None,
        )

    def create_document(
        self, kind: str, title: str = "", document_id: Optional[int] = None
    ) -> Document:
        """
        Create a document in the active tenant.

        Args:
            kind: Document kind
            title: Raw document title
            document_id: Explicit ID (allocated when not given)

        Returns:
            The new document
        """
        conn = self._get_conn()
        created = utcNow()
        cursor = conn.execute(
            "INSERT INTO documents (id, tenant_id, kind, title, created) "
            "VALUES (?, ?, ?, ?, ?)",
            (document_id, self.current_tenant_id(), kind, title,
             created.isoformat(timespec="microseconds")))
        conn.commit()
        LOG.debug("created %s document %d in tenant %d",
                  kind, cursor.lastrowid, self.current_tenant_id())
        return Document(id=cursor.lastrowid, kind=kind, title=title, created=created)

    def get_document(self, document_id: Optional[int]) -> Optional[Document]:
        row = self._get_conn().execute(
            "SELECT * FROM documents WHERE id = ? AND tenant_id = ?",
            (document_id, self.current_tenant_id())).fetchone()
        return self._row_to_document(row) if row else None

    def find_one(self, kind: str, meta_key: str, meta_value: Any) -> Optional[Document]:
        row = self._get_conn().execute(
            """
            SELECT d.* FROM documents d
            JOIN document_meta m ON m.document_id = d.id
            WHERE d.tenant_id = ? AND d.kind = ? AND m.key = ? AND m.value_json = ?
            ORDER BY d.created DESC, d.id DESC
            LIMIT 1
            """,
            (self.current_tenant_id(), kind, meta_key, json.dumps(meta_value))).fetchone()
        return self._row_to_document(row) if row else None

    def get_meta(self, document_id: int, key: str, default: Any = None) -> Any:
        row = self._get_conn().execute(
            """
            SELECT m.value_json FROM document_meta m
            JOIN documents d ON d.id = m.document_id
            WHERE m.document_id = ? AND m.key = ? AND d.tenant_id = ?
            """,
            (document_id, key, self.current_tenant_id())).fetchone()
        if row is None or row["value_json"] is None:
            return default
        return json.loads(row["value_json"])

    def set_meta(self, document_id: int, key: str, value: Any) -> None:
        if self.get_document(document_id) is None:
            raise DocumentNotFoundError(
                "No document {} in tenant {}".format(document_id, self.current_tenant_id()))
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO document_meta (document_id, key, value_json) "
            "VALUES (?, ?, ?)",
            (document_id, key, json.dumps(value)))
        conn.commit()

    def delete_document(self, document_id: int) -> None:
        if self.get_document(document_id) is None:
            LOG.debug("no document %r to delete in tenant %d",
                      document_id, self.current_tenant_id())
            return
        conn = self._get_conn()
        conn.execute("DELETE FROM document_meta WHERE document_id = ?", (document_id,))
        conn.execute(
            "DELETE FROM term_relationships WHERE document_id = ?", (document_id,))
        conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
        conn.commit()
        LOG.debug("deleted document %d in tenant %d",
                  document_id, self.current_tenant_id())

    def set_terms(self, document_id: int, taxonomy: str, names: Sequence[str]) -> List[Term]:
        """
        Replace the terms of one taxonomy attached to a document.

        Terms that do not exist yet in the active tenant are created.
        """
        if self.get_document(document_id) is None:
            raise DocumentNotFoundError(
                "No document {} in tenant {}".format(document_id, self.current_tenant_id()))
        conn = self._get_conn()
        tenant_id = self.current_tenant_id()
        conn.execute(
            """
            DELETE FROM term_relationships WHERE document_id = ? AND term_id IN (
                SELECT id FROM terms WHERE tenant_id = ? AND taxonomy = ?)
            """,
            (document_id, tenant_id, taxonomy))
        position = conn.execute(
            "SELECT COALESCE(MAX(position), -1) FROM term_relationships "
            "WHERE document_id = ?", (document_id,)).fetchone()[0]
        for name in names:
            slug = slugify(name)
            conn.execute(
                "INSERT OR IGNORE INTO terms (tenant_id, taxonomy, name, slug) "
                "VALUES (?, ?, ?, ?)",
                (tenant_id, taxonomy, name, slug))
            term_id = conn.execute(
                "SELECT id FROM terms WHERE tenant_id = ? AND taxonomy = ? AND slug = ?",
                (tenant_id, taxonomy, slug)).fetchone()[0]
            position += 1
            conn.execute(
                "INSERT OR IGNORE INTO term_relationships (document_id, term_id, position) "
                "VALUES (?, ?, ?)",
                (document_id, term_id, position))
        conn.commit()
        return self.get_terms(document_id, [taxonomy])

    def get_terms(self, document_id: int, taxonomies: Sequence[str]) -> List[Term]:
        taxonomies = list(taxonomies or [])
        if not taxonomies:
            return []
        placeholders = ", ".join("?" * len(taxonomies))
        cursor = self._get_conn().execute(
            """
            SELECT t.id, t.name, t.slug, t.taxonomy FROM terms t
            JOIN term_relationships r ON r.term_id = t.id
            WHERE r.document_id = ? AND t.tenant_id = ? AND t.taxonomy IN ({})
            ORDER BY r.position
            """.format(placeholders),
            [document_id, self.current_tenant_id()] + taxonomies)
        return [
            Term(term_id=row["id"], name=row["name"], slug=row["slug"],
                 taxonomy=row["taxonomy"])
            for row in cursor
        ]

    # Network options

    def get_option(self, key: str, default: Any = None) -> Any:
        row = self._get_conn().execute(
            "SELECT value_json FROM network_options WHERE key = ?", (key,)).fetchone()
        if row is None:
            return default
        return json.loads(row["value_json"])

    def set_option(self, key: str, value: Any) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO network_options (key, value_json) VALUES (?, ?)",
            (key, json.dumps(value)))
        conn.commit()

    def close(self) -> None:
        """Close repository and release resources."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
