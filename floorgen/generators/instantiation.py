"""
Instantiation service used by the generator to create and destroy rooms.

The generator only needs a handle whose transform it can set and whose
sockets and bounds it can enumerate. Engines plug in their own service;
InMemoryInstantiator is the default used by tools and tests.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from floorgen.geometry.vector_math import Quaternion, VectorLike
from .room_types import RoomInstance, RoomTemplate

logger = logging.getLogger(__name__)


class InstantiationService(ABC):
    """Creates and destroys room instances."""

    @abstractmethod
    def spawn(self, template: RoomTemplate, position: VectorLike,
              rotation: Quaternion, name: str = "") -> RoomInstance:
        """Create an instance of `template` at the given world transform."""
        pass

    @abstractmethod
    def destroy(self, instance: RoomInstance) -> None:
        """Remove an instance. Destroying an unknown instance is a no-op."""
        pass


class InMemoryInstantiator(InstantiationService):
    """Keeps spawned rooms in a dict; nothing is rendered."""

    def __init__(self):
        self._live: Dict[int, RoomInstance] = {}
        self.spawned_total = 0
        self.destroyed_total = 0

    @property
    def live_instances(self) -> List[RoomInstance]:
        return list(self._live.values())

    def spawn(self, template: RoomTemplate, position: VectorLike,
              rotation: Quaternion, name: str = "") -> RoomInstance:
        instance = RoomInstance(template, position, rotation, name)
        self._live[instance.instance_id] = instance
        self.spawned_total += 1
        return instance

    def destroy(self, instance: RoomInstance) -> None:
        if self._live.pop(instance.instance_id, None) is None:
            return
        instance.release()
        self.destroyed_total += 1
