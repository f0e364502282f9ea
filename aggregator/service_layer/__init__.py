"""
Service layer for sync jobs.

This package contains the sync job entity and the pieces it composes:
the tenant context guard and the network index.
"""

from .context import TenantContextGuard
from .job_service import JobService
from .network_index import IndexAction, NetworkIndex
from .sync_job import SyncJob

__all__ = ["IndexAction", "JobService", "NetworkIndex", "SyncJob", "TenantContextGuard"]
