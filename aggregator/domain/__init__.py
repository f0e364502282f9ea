"""
Domain values for aggregator.

This package contains pure domain logic with no storage coupling.
"""

from .job import DEFAULT_AUTHOR, PLACEHOLDER_TITLES, job_title, positive_int
from .records import Document, Tenant, Term
from .terms import group_terms

__all__ = [
    "DEFAULT_AUTHOR",
    "PLACEHOLDER_TITLES",
    "Document",
    "Tenant",
    "Term",
    "group_terms",
    "job_title",
    "positive_int",
]
