"""
Repository interfaces for network storage.

This module defines the abstract collaborators a sync job talks to.
Implementations handle the actual storage.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from aggregator.domain import Document, Tenant, Term


class TenantDirectory(ABC):
    """
    Lookup of tenants and the active tenant context.

    Only one tenant context is active at a time, process wide.
    """

    @abstractmethod
    def resolve(self, tenant_id: int) -> Optional[Tenant]:
        """
        Get the record of a tenant.

        Args:
            tenant_id: The tenant ID

        Returns:
            The tenant if registered, None otherwise
        """

    @abstractmethod
    def current_tenant_id(self) -> int:
        """Return the ID of the active tenant."""

    @abstractmethod
    def switch_to(self, tenant_id: int) -> None:
        """
        Make another tenant the active one.

        Args:
            tenant_id: The tenant to switch into
        """

    @abstractmethod
    def switch_back(self) -> None:
        """Return to the tenant that was active before the last switch_to."""


class DocumentStore(ABC):
    """
    Document and metadata store of the active tenant.

    Every operation is scoped to whichever tenant is active when it is
    called.
    """

    @abstractmethod
    def find_one(self, kind: str, meta_key: str, meta_value: Any) -> Optional[Document]:
        """
        Find the most recent document whose metadata matches.

        Args:
            kind: Document kind
            meta_key: Metadata key to filter on
            meta_value: Value the metadata must equal

        Returns:
            The newest matching document, None if there is none
        """

    @abstractmethod
    def get_meta(self, document_id: int, key: str, default: Any = None) -> Any:
        """
        Read one metadata value of a document.

        Returns:
            The stored value, or default when it is not set
        """

    @abstractmethod
    def set_meta(self, document_id: int, key: str, value: Any) -> None:
        """Write one metadata value of a document."""

    @abstractmethod
    def delete_document(self, document_id: int) -> None:
        """
        Delete a document with its metadata and term links.

        Deleting a document that does not exist is not an error.
        """

    @abstractmethod
    def get_terms(self, document_id: int, taxonomies: Sequence[str]) -> List[Term]:
        """
        Get the terms attached to a document.

        Args:
            document_id: The document
            taxonomies: Only return terms of these taxonomies

        Returns:
            Flat list of terms, possibly empty
        """


class NetworkOptions(ABC):
    """Key/value options visible from every tenant."""

    @abstractmethod
    def get_option(self, key: str, default: Any = None) -> Any:
        """Read a network option, or default when it is not set."""

    @abstractmethod
    def set_option(self, key: str, value: Any) -> None:
        """Write a network option."""
