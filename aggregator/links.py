"""
Admin links for job documents.

Links are built against whichever tenant is active, so callers switch
into the tenant that owns the document first.
"""

import logging
from typing import Optional

from requests.models import PreparedRequest

from .repository import TenantDirectory

LOG = logging.getLogger(__name__)


def appendQueryParam(url: str, key: str, value) -> str:
    req = PreparedRequest()
    req.prepare_url(url, {key: value})
    return req.url


class AdminLinkBuilder(object):
    def __init__(self, directory: TenantDirectory, scheme="https", admin_path="/wp-admin/"):
        self.directory = directory
        self.scheme = scheme
        self.admin_path = "/" + admin_path.strip("/") + "/"

    def _postUrl(self, document_id: Optional[int], action: str) -> Optional[str]:
        if document_id is None:
            return None
        tenant = self.directory.resolve(self.directory.current_tenant_id())
        base = "{}://{}{}post.php".format(self.scheme, tenant.domain, self.admin_path)
        url = appendQueryParam(base, "post", document_id)
        return appendQueryParam(url, "action", action)

    def edit_link(self, document_id: Optional[int]) -> Optional[str]:
        return self._postUrl(document_id, "edit")

    def delete_link(self, document_id: Optional[int]) -> Optional[str]:
        return self._postUrl(document_id, "delete")

    @staticmethod
    def append_query_param(url: Optional[str], key: str, value) -> Optional[str]:
        if url is None:
            return None
        return appendQueryParam(url, key, value)
