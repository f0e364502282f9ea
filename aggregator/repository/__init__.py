"""
Repository layer for network storage.

This package contains the contracts the sync job relies on and a
SQLite implementation of them.
"""

from .errors import (
    DocumentNotFoundError,
    StoreError,
    TenantContextError,
    UnknownTenantError,
)
from .interface import DocumentStore, NetworkOptions, TenantDirectory
from .sqlite_repository import SqliteNetworkRepository

__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "NetworkOptions",
    "SqliteNetworkRepository",
    "StoreError",
    "TenantContextError",
    "TenantDirectory",
    "UnknownTenantError",
]
