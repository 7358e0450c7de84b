"""
Occupancy registry for broad-phase placement checks.

Holds the spatial record of every room placed in the current generation
pass and answers "would this candidate overlap something?" queries.

The room a candidate connects from is a special case: doorway frames of
the two rooms are expected to overlap slightly, so that entry tolerates an
XZ overlap up to a fraction of the smaller footprint.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from floorgen.errors import DuplicateRegistration
from floorgen.geometry.bounds import AABB, SpatialRecord, combined_bounds

logger = logging.getLogger(__name__)

# Default fraction of the smaller footprint the source room may overlap
DEFAULT_MAX_SOURCE_OVERLAP = 0.15

# Footprints at or below this area never count as overlapping the source
MIN_FOOTPRINT_AREA = 0.01


def footprint_overlap_fraction(test: SpatialRecord, source: SpatialRecord) -> float:
    """XZ overlap between two footprints as a fraction of the smaller one."""
    smaller = min(test.footprint_area_xz, source.footprint_area_xz)
    if smaller <= MIN_FOOTPRINT_AREA:
        return 0.0
    return test.overlap_area_xz(source) / smaller


@dataclass(frozen=True)
class OccupancyEntry:
    """A registered room footprint."""
    owner_id: int
    record: SpatialRecord
    order: int
    name: str = ""


class OccupancyRegistry:
    """Set of currently placed room footprints.

    Not thread-safe; a registry belongs to exactly one generator.
    """

    def __init__(self, max_source_overlap_fraction: float = DEFAULT_MAX_SOURCE_OVERLAP):
        self.max_source_overlap_fraction = max_source_overlap_fraction
        self._entries: Dict[int, OccupancyEntry] = {}
        self._order = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, owner_id: int) -> bool:
        return owner_id in self._entries

    def __iter__(self) -> Iterator[OccupancyEntry]:
        return iter(self.entries())

    def register(self, owner_id: int, record: SpatialRecord, name: str = "") -> OccupancyEntry:
        """Add a footprint for `owner_id`.

        Raises:
            DuplicateRegistration: If the owner already has an entry
        """
        if owner_id in self._entries:
            raise DuplicateRegistration(owner_id, name)
        entry = OccupancyEntry(owner_id, record, next(self._order), name)
        self._entries[owner_id] = entry
        logger.debug(f"Registered {name or owner_id} (total {len(self._entries)})")
        return entry

    def unregister(self, owner_id: int) -> None:
        """Remove the owner's entry; unknown owners are ignored."""
        if self._entries.pop(owner_id, None) is not None:
            logger.debug(f"Unregistered {owner_id} (total {len(self._entries)})")

    def get(self, owner_id: int) -> Optional[OccupancyEntry]:
        return self._entries.get(owner_id)

    def entries(self) -> List[OccupancyEntry]:
        """Entries in registration order."""
        return sorted(self._entries.values(), key=lambda e: e.order)

    def clear(self) -> None:
        self._entries.clear()

    def combined_bounds(self) -> Optional[AABB]:
        """Union of all registered footprints, or None when empty."""
        return combined_bounds(e.record for e in self.entries())

    def query_occupied(self, test: SpatialRecord, ignore_owner: Optional[int] = None) -> bool:
        """Return True if `test` collides with any registered footprint.

        Args:
            test: Candidate footprint (compound records carry their sub-boxes)
            ignore_owner: Room the candidate connects from; overlap with it is
                accepted up to max_source_overlap_fraction

        Returns:
            True on the first confirmed collision
        """
        for entry in self.entries():
            if not test.encapsulating.intersects(entry.record.encapsulating):
                continue

            if ignore_owner is not None and entry.owner_id == ignore_owner:
                fraction = footprint_overlap_fraction(test, entry.record)
                if fraction <= self.max_source_overlap_fraction:
                    continue
                logger.debug(
                    f"Source overlap with {entry.name or entry.owner_id} is "
                    f"{fraction:.1%} (max {self.max_source_overlap_fraction:.1%})"
                )
                return True

            if test.is_compound or entry.record.is_compound:
                if test.intersects(entry.record):
                    logger.debug(f"Sub-box collision with {entry.name or entry.owner_id}")
                    return True
                continue

            logger.debug(f"AABB collision with {entry.name or entry.owner_id}")
            return True

        return False
