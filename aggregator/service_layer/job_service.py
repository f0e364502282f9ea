"""
Business logic for creating and listing sync jobs.

This module contains the JobService class which wires a repository and
a link builder into SyncJob objects.
"""

from __future__ import annotations

import logging
from typing import List

from aggregator.domain import positive_int
from aggregator.repository import SqliteNetworkRepository

from .context import TenantContextGuard
from .network_index import IndexAction, NetworkIndex
from .sync_job import JOB_KIND, META_PORTAL, SyncJob

LOG = logging.getLogger(__name__)


class JobService:
    """
    Service for sync job lifecycle management.

    The repository plays the tenant directory, the document store and
    the network options at once.
    """

    def __init__(self, repo: SqliteNetworkRepository, links=None):
        """
        Initialize service.

        Args:
            repo: Network repository for persistence
            links: Optional admin link builder handed to every job
        """
        self.repo = repo
        self.links = links
        self.index = NetworkIndex(repo)

    def get_job(self, portal, source) -> SyncJob:
        return SyncJob(portal, source, self.repo, self.repo, self.repo, self.links)

    def create_job(self, portal, source, title: str = "") -> SyncJob:
        """
        Create the job document for a portal/source pair.

        If the pair already has a job, that job is returned and nothing
        is written.

        Args:
            portal: ID of the portal tenant
            source: ID of the source tenant
            title: Raw title of the job document

        Returns:
            The job, hydrated from its document
        """
        job = self.get_job(portal, source)
        if job.composite_id is None or job.exists():
            return job

        guard = TenantContextGuard(self.repo)
        with guard.scoped(job.source_id):
            document = self.repo.create_document(JOB_KIND, title)
            self.repo.set_meta(document.id, META_PORTAL, job.portal_id)
        LOG.info("created job document %d for portal %d in source %d",
                 document.id, job.portal_id, job.source_id)

        job = self.get_job(portal, source)
        job.update_network_options(IndexAction.ADD)
        return job

    def set_terms(self, job: SyncJob, taxonomy: str, names: List[str]) -> None:
        """
        Attach terms of one taxonomy to a job document.

        The taxonomy is added to the job's taxonomies when missing. The
        job's grouped terms are only refreshed by loading it again.
        """
        guard = TenantContextGuard(self.repo)
        with guard.scoped(job.source_id):
            self.repo.set_terms(job.document_id, taxonomy, names)
        if taxonomy not in job.get_taxonomies():
            job.set_taxonomies(job.get_taxonomies() + [taxonomy])

    def jobs_for_portal(self, portal) -> List[SyncJob]:
        portal_id = positive_int(portal)
        if portal_id is None:
            return []
        return [self.get_job(portal_id, source_id)
                for source_id in self.index.sources_of(portal_id)]

    def jobs_for_source(self, source) -> List[SyncJob]:
        source_id = positive_int(source)
        if source_id is None:
            return []
        return [self.get_job(portal_id, source_id)
                for portal_id in self.index.portals_of(source_id)]

    def close(self) -> None:
        self.repo.close()
