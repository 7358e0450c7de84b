"""
Navigation rebuild hook.

The generator asks for one rebuild per completed pass, covering the union
of all placed rooms. Pathfinding itself lives outside this package.
"""

import logging
from abc import ABC, abstractmethod

from floorgen.geometry.bounds import AABB

logger = logging.getLogger(__name__)


class NavigationRebuilder(ABC):

    @abstractmethod
    def rebuild(self, bounds: AABB, padding: float) -> None:
        """Rebuild navigation data covering `bounds` grown by `padding`."""
        pass


class NullNavigationRebuilder(NavigationRebuilder):
    """Logs the requested area and does nothing else."""

    def rebuild(self, bounds: AABB, padding: float) -> None:
        area = bounds.expanded(padding)
        size = area.size
        logger.debug(f"Navigation rebuild requested for {size[0]:.1f} x {size[2]:.1f} area")
