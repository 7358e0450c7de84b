"""
Room catalog: indexed room templates with filtered and weighted lookup.

The catalog is an explicit object handed to the generator. Special rooms
(the start elevator and the exit elevator) are designated separately and
never enter the random growth pool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .random_source import SeededRandom
from .room_types import RoomCategory, RoomTemplate
from .socket_system import SocketType

logger = logging.getLogger(__name__)

# Identifiers written into cached layouts for the designated rooms.
# Older saves use the legacy aliases.
START_ROOM_IDENTIFIER = "SafeElevatorRoom"
START_ROOM_ALIASES = ("SafeElevatorRoom", "EntryElevatorRoom", "EntryRoom")
EXIT_ROOM_IDENTIFIER = "ExitElevatorRoom"
EXIT_ROOM_ALIASES = ("ExitElevatorRoom", "ExitRoom")


@dataclass
class CatalogStatistics:
    total_rooms: int = 0
    enabled_rooms: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_socket_type: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> str:
        categories = ", ".join(f"{k}={v}" for k, v in sorted(self.by_category.items()))
        sockets = ", ".join(f"{k}={v}" for k, v in sorted(self.by_socket_type.items()))
        return (
            f"{self.enabled_rooms}/{self.total_rooms} rooms enabled; "
            f"categories: {categories or '-'}; socket types: {sockets or '-'}"
        )


class RoomCatalog:
    """Registry of room templates."""

    def __init__(self, name: str = "default",
                 start_room: Optional[RoomTemplate] = None,
                 exit_room: Optional[RoomTemplate] = None):
        self.name = name
        self.start_room = start_room
        self.exit_room = exit_room
        self._rooms: List[RoomTemplate] = []

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[RoomTemplate]:
        return iter(list(self._rooms))

    @property
    def rooms(self) -> List[RoomTemplate]:
        return list(self._rooms)

    # --- registration --------------------------------------------------------

    def register(self, template: RoomTemplate) -> None:
        """Add a template, replacing any existing one with the same room_id."""
        for i, existing in enumerate(self._rooms):
            if existing.room_id == template.room_id:
                self._rooms[i] = template
                return
        self._rooms.append(template)

    def unregister(self, room_id: str) -> bool:
        for i, existing in enumerate(self._rooms):
            if existing.room_id == room_id:
                del self._rooms[i]
                return True
        return False

    def get(self, room_id: str) -> Optional[RoomTemplate]:
        for template in self._rooms:
            if template.room_id == room_id:
                return template
        return None

    def refresh_all_rooms(self) -> None:
        """Recompute socket info for every template from its geometry."""
        for template in self._all_templates():
            template.refresh_socket_info()

    def _all_templates(self) -> List[RoomTemplate]:
        templates = list(self._rooms)
        for special in (self.start_room, self.exit_room):
            if special is not None and special not in templates:
                templates.append(special)
        return templates

    # --- filtered lookup -----------------------------------------------------

    def enabled_rooms(self) -> List[RoomTemplate]:
        return [t for t in self._rooms if t.is_enabled]

    def rooms_by_category(self, category: RoomCategory) -> List[RoomTemplate]:
        return [t for t in self._rooms if t.is_enabled and t.category == category]

    def rooms_by_sector(self, sector: int) -> List[RoomTemplate]:
        return [t for t in self._rooms if t.is_enabled and t.sector_number == sector]

    def lookup(self, socket_type: SocketType,
               category: Optional[RoomCategory] = None,
               sector: Optional[int] = None,
               include_disabled: bool = False) -> List[RoomTemplate]:
        """Templates offering `socket_type`, filtered by the given tags.

        Without an explicit category, special rooms (entry, exit, safe) are
        excluded so random growth never places them.
        """
        result = []
        for template in self._rooms:
            if not include_disabled and not template.is_enabled:
                continue
            if not template.has_socket_type(socket_type):
                continue
            if category is not None:
                if template.category != category:
                    continue
            elif template.category.is_special:
                continue
            if sector is not None and template.sector_number != sector:
                continue
            result.append(template)
        return result

    def exit_candidates(self, socket_type: SocketType) -> List[RoomTemplate]:
        """Exit templates that can attach to a socket of `socket_type`."""
        candidates = []
        if self.exit_room is not None and self.exit_room.has_socket_type(socket_type):
            candidates.append(self.exit_room)
        for template in self.lookup(socket_type, category=RoomCategory.EXIT_ELEVATOR):
            if template not in candidates:
                candidates.append(template)
        return candidates

    # --- random selection ----------------------------------------------------

    @staticmethod
    def weighted_pick(candidates: List[RoomTemplate], rng: SeededRandom) -> Optional[RoomTemplate]:
        """Pick a template with probability proportional to spawn_weight.

        Weights <= 0 count as 1 so a misconfigured template is never
        silently excluded. Exactly one draw is consumed per call.
        """
        if not candidates:
            return None

        weights = [t.spawn_weight if t.spawn_weight > 0 else 1 for t in candidates]
        roll = rng.uniform_int(0, sum(weights))

        cumulative = 0
        for template, weight in zip(candidates, weights):
            cumulative += weight
            if roll < cumulative:
                return template
        return candidates[-1]

    def random_room_with_socket_type(self, socket_type: SocketType, rng: SeededRandom,
                                     sector: Optional[int] = None) -> Optional[RoomTemplate]:
        """Weighted pick from the growth pool for `socket_type`.

        A single candidate is returned without drawing. A sector filter that
        leaves nothing falls back to the whole pool.
        """
        candidates = self.lookup(socket_type, sector=sector)
        if not candidates and sector is not None:
            logger.debug(f"No {socket_type.value} rooms in sector {sector}, using all sectors")
            candidates = self.lookup(socket_type)
        if len(candidates) == 1:
            return candidates[0]
        return self.weighted_pick(candidates, rng)

    # --- identity ------------------------------------------------------------

    def identity_of(self, template: RoomTemplate) -> str:
        """Identifier under which a template is written to layout caches."""
        if template is self.start_room:
            return START_ROOM_IDENTIFIER
        if template is self.exit_room:
            return EXIT_ROOM_IDENTIFIER
        return template.identifier

    def find_by_identity(self, identifier: str) -> Optional[RoomTemplate]:
        """Resolve a cached identifier back to a template.

        Designated rooms answer to their legacy aliases first; other
        templates match on display name, then room_id, then geometry name.
        """
        if not identifier:
            return None

        if self.start_room is not None and (
                identifier in START_ROOM_ALIASES or identifier == self.start_room.identifier):
            return self.start_room
        if self.exit_room is not None and (
                identifier in EXIT_ROOM_ALIASES or identifier == self.exit_room.identifier):
            return self.exit_room

        for template in self._rooms:
            if template.display_name == identifier:
                return template
        for template in self._rooms:
            if template.room_id == identifier:
                return template
        for template in self._rooms:
            if template.geometry is not None and template.geometry.name == identifier:
                return template
        return None

    # --- health --------------------------------------------------------------

    def has_exit(self) -> bool:
        return self.exit_room is not None or bool(self.rooms_by_category(RoomCategory.EXIT_ELEVATOR))

    def has_all_special_rooms(self) -> bool:
        return self.start_room is not None and self.has_exit()

    def validate(self) -> List[str]:
        """Problems that make the catalog unusable for generation."""
        problems = []
        if not self._rooms:
            problems.append("Catalog has no room templates")
        if self.start_room is None:
            problems.append("No start room designated")
        elif not self.start_room.is_valid():
            problems.append(f"Start room '{self.start_room.identifier}' is invalid")
        if not self.has_exit():
            problems.append("No exit room designated")
        elif self.exit_room is not None and not self.exit_room.is_valid():
            problems.append(f"Exit room '{self.exit_room.identifier}' is invalid")

        for template in self._rooms:
            if not template.is_valid():
                problems.append(f"Room '{template.identifier or template.room_id}' is invalid")
        return problems

    def is_valid(self) -> bool:
        return not self.validate()

    def statistics(self) -> CatalogStatistics:
        stats = CatalogStatistics(total_rooms=len(self._rooms))
        for template in self._rooms:
            if not template.is_enabled:
                continue
            stats.enabled_rooms += 1
            key = template.category.name
            stats.by_category[key] = stats.by_category.get(key, 0) + 1
            for socket_type in template.socket_types:
                stats.by_socket_type[socket_type.value] = stats.by_socket_type.get(socket_type.value, 0) + 1
        return stats
