"""
Network-wide index of portal and source relationships.

Two lists are kept per relationship: the sources a portal receives
from, and the portals a source pushes to.
"""

from enum import Enum
import logging
from typing import List

from aggregator.repository import NetworkOptions

LOG = logging.getLogger(__name__)


class IndexAction(Enum):
    ADD = "add"
    DELETE = "delete"


def sourcesKey(portal_id: int) -> str:
    return "aggregator_{}_source_blogs".format(portal_id)


def portalsKey(source_id: int) -> str:
    return "aggregator_{}_portal_blogs".format(source_id)


class NetworkIndex:
    def __init__(self, options: NetworkOptions):
        self.options = options

    def sources_of(self, portal_id: int) -> List[int]:
        return list(self.options.get_option(sourcesKey(int(portal_id)), []))

    def portals_of(self, source_id: int) -> List[int]:
        return list(self.options.get_option(portalsKey(int(source_id)), []))

    def update(self, action, portal_id: int, source_id: int) -> None:
        """
        Add or delete one portal/source relationship.

        Both lists behave as ordered sets. Both are written back even
        when nothing changed, and an emptied list is stored as an empty
        list.

        Args:
            action: IndexAction or its value, "add" or "delete"
            portal_id: The portal tenant
            source_id: The source tenant

        Raises:
            ValueError: If action is not a known IndexAction
        """
        action = IndexAction(action)
        portal_id = int(portal_id)
        source_id = int(source_id)

        sources = self.sources_of(portal_id)
        portals = self.portals_of(source_id)

        if action is IndexAction.ADD:
            if source_id not in sources:
                sources.append(source_id)
            if portal_id not in portals:
                portals.append(portal_id)
        else:
            if source_id in sources:
                sources.remove(source_id)
            if portal_id in portals:
                portals.remove(portal_id)

        LOG.debug("%s portal %d / source %d: sources=%r portals=%r",
                  action.value, portal_id, source_id, sources, portals)
        self.options.set_option(sourcesKey(portal_id), sources)
        self.options.set_option(portalsKey(source_id), portals)
