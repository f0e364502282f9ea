"""
The sync job entity.

A sync job says which post types, taxonomies and terms flow from a
source tenant to a portal tenant, and which portal author the pushed
posts are attributed to. Its settings live on a single job document in
the source tenant's store; the portal/source relationship itself is
also recorded in the network index.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from aggregator.domain import DEFAULT_AUTHOR, Tenant, Term, group_terms, job_title, positive_int
from aggregator.repository import DocumentStore, NetworkOptions, TenantDirectory

from .context import TenantContextGuard
from .network_index import IndexAction, NetworkIndex

LOG = logging.getLogger(__name__)

JOB_KIND = "aggregator_job"

META_PORTAL = "portal"
META_POST_TYPES = "post_types"
META_TAXONOMIES = "taxonomies"
META_AUTHOR = "author"


class SyncJob:  # pylint: disable=too-many-instance-attributes
    """
    Sync settings between one portal and one source tenant.

    Construction with an invalid tenant ID leaves every field at its
    default; callers check exists() or composite_id before relying on
    the job. On such a job, setters, links, index updates and deletion
    are silent no-ops. Every setter writes through to the job document inside the
    source tenant's context before updating the in-memory value.
    """

    def __init__(
        self,
        portal,
        source,
        directory: TenantDirectory,
        store: DocumentStore,
        options: NetworkOptions,
        links=None,
    ):
        """
        Look up the job for a portal/source pair.

        Args:
            portal: ID of the portal tenant
            source: ID of the source tenant
            directory: Tenant lookup and context switching
            store: Document store of the active tenant
            options: Network-wide options, for the network index
            links: Optional admin link builder
        """
        self.directory = directory
        self.store = store
        self.links = links
        self.index = NetworkIndex(options)

        self.portal: Optional[Tenant] = None
        self.source: Optional[Tenant] = None
        self.document_id: Optional[int] = None
        self.title: Optional[str] = None
        self.author = DEFAULT_AUTHOR
        self.composite_id: Optional[str] = None
        self._post_types: List[str] = []
        self._taxonomies: List[str] = []
        self._terms: Dict[str, List[Term]] = {}
        self._guard: Optional[TenantContextGuard] = None

        portal_id = positive_int(portal)
        source_id = positive_int(source)
        if portal_id is None or source_id is None:
            LOG.debug("invalid tenant IDs portal=%r source=%r", portal, source)
            return

        self._guard = TenantContextGuard(directory)

        # resolve() gives None for an unknown tenant; that surfaces as an
        # AttributeError on the first dereference below.
        self.portal = directory.resolve(portal_id)
        self.source = directory.resolve(source_id)

        with self._guard.scoped(source_id):
            document = store.find_one(JOB_KIND, META_PORTAL, self.portal.id)
            if document is not None:
                self._hydrate(document)

        self.composite_id = "{}_{}".format(
            self.source.id, "" if self.document_id is None else self.document_id)
        LOG.debug("loaded job %s (%r)", self.composite_id, self.title)

    def _hydrate(self, document) -> None:
        self.document_id = document.id
        self.title = job_title(document.title, document.id)
        self._post_types = list(
            self.store.get_meta(document.id, META_POST_TYPES, None) or [])
        self._taxonomies = list(
            self.store.get_meta(document.id, META_TAXONOMIES, None) or [])
        self._terms = group_terms(self.store.get_terms(document.id, self._taxonomies))
        author = self.store.get_meta(document.id, META_AUTHOR, None)
        if author is not None:
            self.author = author

    def __repr__(self) -> str:
        return "SyncJob({!r}, portal={!r}, source={!r})".format(
            self.composite_id, self.portal_id, self.source_id)

    def exists(self) -> bool:
        """Return True if the job is backed by a document."""
        return self.document_id is not None

    @property
    def portal_id(self) -> Optional[int]:
        return self.portal.id if self.portal else None

    @property
    def source_id(self) -> Optional[int]:
        return self.source.id if self.source else None

    def get_portal_name(self) -> str:
        """Domain of the portal tenant, for admin listings."""
        return self.portal.domain

    def get_source_name(self) -> str:
        """Domain of the source tenant, for admin listings."""
        return self.source.domain

    def _linked(self) -> bool:
        if self._guard is None:
            LOG.debug("no tenants linked, ignoring call on unlinked job")
            return False
        return True

    def _writeMeta(self, key: str, value) -> bool:
        if not self._linked():
            return False
        with self._guard.scoped(self.source_id):
            self.store.set_meta(self.document_id, key, value)
        return True

    def set_portal_meta(self) -> None:
        """Record the portal ID on the job document."""
        self._writeMeta(META_PORTAL, self.portal_id)

    def get_post_types(self) -> List[str]:
        return self._post_types

    def set_post_types(self, post_types: Sequence[str]) -> None:
        post_types = list(post_types)
        if self._writeMeta(META_POST_TYPES, post_types):
            self._post_types = post_types

    def get_taxonomies(self) -> List[str]:
        return self._taxonomies

    def set_taxonomies(self, taxonomies: Sequence[str]) -> None:
        taxonomies = list(taxonomies)
        if self._writeMeta(META_TAXONOMIES, taxonomies):
            self._taxonomies = taxonomies

    def get_terms(self, taxonomy: str) -> Optional[List[Term]]:
        """
        Get the terms to sync for one taxonomy.

        Returns:
            The terms, or None when the taxonomy has none
        """
        return self._terms.get(taxonomy)

    def get_term_count(self) -> int:
        return sum(len(terms) for terms in self._terms.values())

    def get_author(self) -> int:
        return self.author

    def set_author(self, author_id) -> None:
        """
        Set the portal author that pushed posts are attributed to.

        Anything but a positive integer is ignored without writing.
        """
        author = positive_int(author_id)
        if author is None:
            LOG.debug("ignoring author %r for job %s", author_id, self.composite_id)
            return
        if self._writeMeta(META_AUTHOR, author):
            self.author = author

    def set_document_id(self, document_id) -> None:
        self.document_id = positive_int(document_id)

    def get_edit_link(self) -> Optional[str]:
        """Edit link of the job document, carrying the portal ID."""
        if not self._linked():
            return None
        with self._guard.scoped(self.source_id):
            url = self.links.edit_link(self.document_id)
            url = self.links.append_query_param(url, "portal", self.portal_id)
        return url

    def get_delete_link(self) -> Optional[str]:
        if not self._linked():
            return None
        with self._guard.scoped(self.source_id):
            url = self.links.delete_link(self.document_id)
        return url

    def update_network_options(self, action=IndexAction.ADD) -> None:
        """Add or delete this portal/source pair in the network index."""
        if not self._linked():
            return
        self.index.update(action, self.portal_id, self.source_id)

    def delete_job(self) -> None:
        """
        Delete the job document and drop the pair from the network index.

        The job no longer exists() afterwards; composite_id is kept.
        """
        if not self._linked():
            return
        with self._guard.scoped(self.source_id):
            self.store.delete_document(self.document_id)
        self.document_id = None
        LOG.debug("deleted job %s", self.composite_id)
        self.update_network_options(IndexAction.DELETE)
