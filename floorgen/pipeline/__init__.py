"""
Floor generation pipeline: the layout generator and its collaborators.

Usage:
    from floorgen.generators.builtin import create_default_catalog
    from floorgen.pipeline import FloorGenerator, FloorStateManager

    floor_states = FloorStateManager()
    floor_states.initialize(world_seed=12345)
    generator = FloorGenerator(create_default_catalog(), floor_states)
    result = generator.generate(1)
"""

from .events import GENERATION_COMPLETE, GENERATION_STARTED, EventManager
from .floor_state import SEED_MULTIPLIER, FloorState, FloorStateManager
from .layout_generator import (
    EXIT_NAME_PREFIX,
    START_ROOM_NAME,
    FloorGenerator,
    GenerationPhase,
    GenerationResult,
    GenerationState,
    GeneratorDebugInfo,
)
from .navigation import NavigationRebuilder, NullNavigationRebuilder

__all__ = [
    'GENERATION_COMPLETE',
    'GENERATION_STARTED',
    'EventManager',
    'SEED_MULTIPLIER',
    'FloorState',
    'FloorStateManager',
    'EXIT_NAME_PREFIX',
    'START_ROOM_NAME',
    'FloorGenerator',
    'GenerationPhase',
    'GenerationResult',
    'GenerationState',
    'GeneratorDebugInfo',
    'NavigationRebuilder',
    'NullNavigationRebuilder',
]
