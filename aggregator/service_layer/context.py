"""
Guard around the process-wide active tenant.
"""

from contextlib import contextmanager
import logging

from aggregator.repository import TenantDirectory

LOG = logging.getLogger(__name__)


class TenantContextGuard:
    """
    Switch into another tenant and back without redundant switches.

    The tenant active when the guard is created is its home. There is no
    depth counter: a guard only ever goes one level deep, home to target
    and back again.
    """

    def __init__(self, directory: TenantDirectory):
        self.directory = directory
        self.home = directory.current_tenant_id()

    def ensure(self, target: int) -> None:
        """Switch into target unless it is already active."""
        if self.directory.current_tenant_id() != target:
            LOG.debug("switch %d -> %d", self.directory.current_tenant_id(), target)
            self.directory.switch_to(target)

    def restore(self) -> None:
        """Switch back home unless home is already active."""
        if self.directory.current_tenant_id() != self.home:
            LOG.debug("restore %d -> %d", self.directory.current_tenant_id(), self.home)
            self.directory.switch_back()

    @contextmanager
    def scoped(self, target: int):
        """Run the block inside target's context, then return home."""
        self.ensure(target)
        try:
            yield
        finally:
            self.restore()
