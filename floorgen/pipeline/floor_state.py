"""
Per-floor persistent state: generation seed, visited flag and cached layout.

Floor seeds are derived from a single world seed so a whole run can be
reproduced from one number:

    floor_seed = world_seed + floor_number * 7919

States are saved as floor_states.json.
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from floorgen.generators.layout_cache import CachedLayout

logger = logging.getLogger(__name__)

SEED_MULTIPLIER = 7919
SAVE_FILE_NAME = "floor_states.json"


@dataclass
class FloorState:
    floor_number: int
    generation_seed: int
    is_visited: bool = False
    cached_layout: Optional[CachedLayout] = None

    @property
    def has_cached_layout(self) -> bool:
        return self.cached_layout is not None and self.cached_layout.is_replayable

    def to_dict(self) -> Dict[str, Any]:
        return {
            'floor_number': self.floor_number,
            'generation_seed': self.generation_seed,
            'is_visited': self.is_visited,
            'cached_layout': self.cached_layout.to_dict() if self.cached_layout else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FloorState':
        layout = data.get('cached_layout')
        return cls(
            floor_number=int(data['floor_number']),
            generation_seed=int(data['generation_seed']),
            is_visited=bool(data.get('is_visited', False)),
            cached_layout=CachedLayout.from_dict(layout) if layout else None,
        )


class FloorStateManager:
    """Owns the world seed and every floor's state for one game session."""

    def __init__(self, seed_multiplier: int = SEED_MULTIPLIER):
        self.seed_multiplier = seed_multiplier
        self.world_seed = 0
        self.current_floor_number = 1
        self._floor_states: Dict[int, FloorState] = {}
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, world_seed: int = 0) -> None:
        """Start a new session. A world seed of 0 picks a random one."""
        if world_seed == 0:
            world_seed = random.randint(-2**31, 2**31 - 1)
        self.world_seed = world_seed
        self.current_floor_number = 1
        self._floor_states.clear()
        self._initialized = True
        logger.info(f"Floor states initialized with world seed {self.world_seed}")

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            logger.warning("Floor states used before initialization, picking a random world seed")
            self.initialize()

    def get_floor_seed(self, floor_number: int) -> int:
        self._ensure_initialized()
        return self.world_seed + floor_number * self.seed_multiplier

    def get_or_create_floor_state(self, floor_number: int) -> FloorState:
        self._ensure_initialized()
        state = self._floor_states.get(floor_number)
        if state is None:
            state = FloorState(floor_number, self.get_floor_seed(floor_number))
            self._floor_states[floor_number] = state
            logger.debug(f"Created state for floor {floor_number} with seed {state.generation_seed}")
        return state

    def get_floor_state(self, floor_number: int) -> Optional[FloorState]:
        return self._floor_states.get(floor_number)

    def has_visited_floor(self, floor_number: int) -> bool:
        state = self._floor_states.get(floor_number)
        return state is not None and state.is_visited

    def mark_floor_visited(self, floor_number: int) -> None:
        self.get_or_create_floor_state(floor_number).is_visited = True
        logger.debug(f"Marked floor {floor_number} as visited")

    def set_specific_seed(self, floor_number: int, seed: int) -> None:
        """Override one floor's seed; its cached layout no longer applies."""
        state = self.get_or_create_floor_state(floor_number)
        state.generation_seed = seed
        state.cached_layout = None

    def clear_cached_layout(self, floor_number: int) -> None:
        state = self._floor_states.get(floor_number)
        if state is not None:
            state.cached_layout = None

    def session_stats(self) -> str:
        cached = sum(1 for s in self._floor_states.values() if s.has_cached_layout)
        visited = sum(1 for s in self._floor_states.values() if s.is_visited)
        return (
            f"World Seed: {self.world_seed}\n"
            f"Current Floor: {self.current_floor_number}\n"
            f"Floors Known: {len(self._floor_states)} (visited {visited}, cached {cached})\n"
            f"Initialized: {self._initialized}"
        )

    # --- persistence ---------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'world_seed': self.world_seed,
            'current_floor_number': self.current_floor_number,
            'floor_states': [s.to_dict() for _, s in sorted(self._floor_states.items())],
        }

    def save_to_json(self, file_path: Path) -> Path:
        """
        Write all floor states.

        Raises:
            OSError: If the file cannot be written
        """
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved {len(self._floor_states)} floor state(s) to {file_path}")
        return file_path

    def load_from_json(self, file_path: Path) -> bool:
        """
        Replace the session with the states stored in `file_path`.

        Returns:
            True on success; False (state untouched) if the file is missing
            or malformed
        """
        if not file_path.exists():
            logger.info(f"No floor state file at {file_path}")
            return False

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            states = [FloorState.from_dict(d) for d in data.get('floor_states', [])]
            world_seed = int(data['world_seed'])
            current = int(data.get('current_floor_number', 1))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load floor states from {file_path}: {e}")
            return False

        self.world_seed = world_seed
        self.current_floor_number = current
        self._floor_states = {s.floor_number: s for s in states}
        self._initialized = True
        logger.info(f"Loaded {len(states)} floor state(s), world seed {world_seed}")
        return True
