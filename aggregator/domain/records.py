"""
Plain records handed out by the store collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Tenant:
    """One site of the network."""

    id: int
    domain: str


@dataclass(frozen=True)
class Term:
    """A taxonomy term, tagged with the taxonomy it belongs to."""

    term_id: int
    name: str
    slug: str
    taxonomy: str


@dataclass(frozen=True)
class Document:
    """A document in a single tenant's store."""

    id: int
    kind: str
    title: str = ""
    created: Optional[datetime] = None
