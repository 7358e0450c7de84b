"""
Floor layout generator.

Grows a connected graph of rooms outward from the start elevator, spending
one door credit per connection, then attaches an exit elevator to one of
the remaining open sockets and seals everything still open with blockades.

Each pass runs:

    CLEARING -> SEEDING -> PLACING_START -> GROWING -> PLACING_EXIT
             -> SEALING_DEAD_ENDS -> CACHING_OR_REPLAYING -> DONE | FAILED

A pass is fully determined by (base seed + attempt number): every random
decision draws from the one SeededRandom in the same order. Passes that
miss the exit or leave too many credits unused are retried with the next
seed. A floor that was visited before and has a cached layout is replayed
transform-for-transform instead of being regenerated.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from floorgen.config.settings import GeneratorSettings
from floorgen.errors import CacheReplayError, GenerationInProgressError, PreconditionError
from floorgen.generators.catalog import RoomCatalog
from floorgen.generators.instantiation import InMemoryInstantiator, InstantiationService
from floorgen.generators.layout_cache import capture_layout, resolve_placements
from floorgen.generators.occupancy import OccupancyRegistry
from floorgen.generators.random_source import SeededRandom
from floorgen.generators.room_types import RoomCategory, RoomInstance, RoomTemplate
from floorgen.generators.socket_system import Blockade, ConnectionResolver, Socket
from floorgen.geometry.vector_math import Quaternion, VectorLike, as_vec3, distance
from floorgen.validation import ValidationResult, ValidationStage, validate_floor_layout
from .events import GENERATION_COMPLETE, GENERATION_STARTED, EventManager
from .floor_state import FloorState, FloorStateManager
from .navigation import NavigationRebuilder, NullNavigationRebuilder

logger = logging.getLogger(__name__)

START_ROOM_NAME = "SafeElevatorRoom"
EXIT_NAME_PREFIX = "ExitRoom_"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class GenerationPhase(Enum):
    IDLE = "idle"
    CLEARING = "clearing"
    SEEDING = "seeding"
    PLACING_START = "placing_start"
    GROWING = "growing"
    PLACING_EXIT = "placing_exit"
    SEALING_DEAD_ENDS = "sealing_dead_ends"
    CACHING_OR_REPLAYING = "caching_or_replaying"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# State / Result dataclasses
# ---------------------------------------------------------------------------

@dataclass
class GenerationState:
    """Everything one generation pass creates. Replaced wholesale on clear."""
    budget: int = 0
    credits_remaining: int = 0
    frontier: List[Socket] = field(default_factory=list)
    placed_rooms: List[RoomInstance] = field(default_factory=list)
    placed_blockades: List[Blockade] = field(default_factory=list)
    connections_made: int = 0
    exit_placed: bool = False
    attempt: int = 0
    seed: Optional[int] = None
    start_room: Optional[RoomInstance] = None
    exit_room: Optional[RoomInstance] = None

    @property
    def used_fraction(self) -> float:
        if self.budget <= 0:
            return 0.0
        return 1.0 - self.credits_remaining / self.budget


@dataclass
class GenerationResult:
    success: bool
    floor_number: int
    seed: Optional[int] = None
    attempts: int = 0
    room_count: int = 0
    connections_made: int = 0
    credits_remaining: int = 0
    budget: int = 0
    replayed: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    validation: Optional[ValidationResult] = None

    @property
    def used_fraction(self) -> float:
        if self.budget <= 0:
            return 0.0
        return 1.0 - self.credits_remaining / self.budget

    def add_error(self, error: str, phase: Optional[GenerationPhase] = None):
        if phase:
            error = f"[{phase.value}] {error}"
        self.errors.append(error)

    def add_warning(self, warning: str, phase: Optional[GenerationPhase] = None):
        if phase:
            warning = f"[{phase.value}] {warning}"
        self.warnings.append(warning)

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'floor_number': self.floor_number,
            'seed': self.seed,
            'attempts': self.attempts,
            'room_count': self.room_count,
            'connections_made': self.connections_made,
            'credits_remaining': self.credits_remaining,
            'budget': self.budget,
            'used_fraction': round(self.used_fraction, 4),
            'replayed': self.replayed,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
            'validation': self.validation.to_dict() if self.validation else None,
        }


@dataclass(frozen=True)
class GeneratorDebugInfo:
    """Read-only snapshot of the generator for diagnostics."""
    phase: GenerationPhase
    floor_number: int
    seed: Optional[int]
    attempt: int
    budget: int
    credits_remaining: int
    connections_made: int
    frontier_size: int
    room_count: int
    blockade_count: int
    exit_placed: bool
    registry_size: int
    replayed: bool
    draw_count: int
    room_names: Tuple[str, ...] = ()

    def summary(self) -> str:
        return (
            f"phase={self.phase.value} floor={self.floor_number} seed={self.seed} "
            f"attempt={self.attempt} rooms={self.room_count} "
            f"connections={self.connections_made} "
            f"credits={self.credits_remaining}/{self.budget} "
            f"frontier={self.frontier_size} blockades={self.blockade_count} "
            f"exit={'yes' if self.exit_placed else 'no'}"
        )


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class FloorGenerator:
    """Generates and replays floor layouts.

    All collaborators are passed in explicitly; nothing is global. One
    generator runs one pass at a time; re-entrant calls (for example from
    an event listener) raise GenerationInProgressError.

    Args:
        catalog: Room templates, including the designated start and exit rooms
        floor_states: Seed and layout cache source; required in seed-based mode
        settings: Budget, retry and placement settings
        rng: Shared random stream
        instantiator: Creates and destroys room instances
        navigation: Receives one rebuild request per finished floor
        events: Receives the generation started/complete notifications
        origin_position: Where the start room is placed
        origin_rotation: Orientation of the start room
    """

    def __init__(self,
                 catalog: Optional[RoomCatalog],
                 floor_states: Optional[FloorStateManager] = None,
                 settings: Optional[GeneratorSettings] = None,
                 rng: Optional[SeededRandom] = None,
                 instantiator: Optional[InstantiationService] = None,
                 navigation: Optional[NavigationRebuilder] = None,
                 events: Optional[EventManager] = None,
                 origin_position: VectorLike = (0.0, 0.0, 0.0),
                 origin_rotation: Optional[Quaternion] = None):
        self.catalog = catalog
        self.floor_states = floor_states
        self.settings = settings or GeneratorSettings()
        self.rng = rng or SeededRandom()
        self.instantiator = instantiator or InMemoryInstantiator()
        self.navigation = navigation or NullNavigationRebuilder()
        self.events = events or EventManager()
        self.origin_position = as_vec3(origin_position)
        self.origin_rotation = origin_rotation or Quaternion.identity()

        self.registry = OccupancyRegistry(self.settings.max_source_overlap_fraction)
        self.resolver = ConnectionResolver(self.settings.door_template)
        self.state = GenerationState()
        self.phase = GenerationPhase.IDLE
        self.floor_number = 0
        self.replayed = False
        self._busy = False

    # --- read access ---------------------------------------------------------

    @property
    def rooms(self) -> List[RoomInstance]:
        return list(self.state.placed_rooms)

    @property
    def blockades(self) -> List[Blockade]:
        return list(self.state.placed_blockades)

    @property
    def start_room(self) -> Optional[RoomInstance]:
        return self.state.start_room

    @property
    def exit_room(self) -> Optional[RoomInstance]:
        return self.state.exit_room

    def debug_info(self) -> GeneratorDebugInfo:
        state = self.state
        return GeneratorDebugInfo(
            phase=self.phase,
            floor_number=self.floor_number,
            seed=state.seed,
            attempt=state.attempt,
            budget=state.budget,
            credits_remaining=state.credits_remaining,
            connections_made=state.connections_made,
            frontier_size=len(state.frontier),
            room_count=len(state.placed_rooms),
            blockade_count=len(state.placed_blockades),
            exit_placed=state.exit_placed,
            registry_size=len(self.registry),
            replayed=self.replayed,
            draw_count=self.rng.draw_count,
            room_names=tuple(room.name for room in state.placed_rooms),
        )

    # --- public entry points -------------------------------------------------

    def generate(self, floor_number: int) -> GenerationResult:
        """Build (or replay) the layout for `floor_number`.

        Always clears the previous floor first, so repeated calls are safe.

        Raises:
            PreconditionError: Catalog, settings or seed source unusable;
                raised before anything is touched
            GenerationInProgressError: Called while a pass is running
        """
        if self._busy:
            raise GenerationInProgressError("A floor is already being generated")
        if floor_number < 1:
            logger.warning(f"Floor number {floor_number} is below 1, using floor 1")
            floor_number = 1
        self._check_preconditions()

        self._busy = True
        started = False
        try:
            self.registry.max_source_overlap_fraction = self.settings.max_source_overlap_fraction
            self.resolver.door_template = self.settings.door_template
            self.floor_number = floor_number
            self.replayed = False
            started = True
            self.events.publish(GENERATION_STARTED)

            floor_state = None
            if self.settings.use_seed_based_generation:
                floor_state = self.floor_states.get_or_create_floor_state(floor_number)

            result = None
            if floor_state is not None and floor_state.is_visited and floor_state.has_cached_layout:
                result = self._replay(floor_state)
            if result is None:
                result = self._generate_with_retries(floor_state)
            return result
        finally:
            self._busy = False
            # Paired with STARTED even when the pass raised
            if started:
                self.events.publish(GENERATION_COMPLETE)

    def clear(self) -> None:
        """Destroy every placed room and blockade and reset the registry."""
        if self._busy:
            raise GenerationInProgressError("Cannot clear while a floor is being generated")
        self._clear_placed()
        self.phase = GenerationPhase.IDLE

    # --- preconditions -------------------------------------------------------

    def _check_preconditions(self) -> None:
        problems = list(self.settings.validate())
        if self.catalog is None:
            problems.append("No room catalog assigned")
        else:
            problems.extend(self.catalog.validate())
        if self.settings.use_seed_based_generation and (
                self.floor_states is None or not self.floor_states.is_initialized):
            problems.append("Floor state manager is not initialized (no seed source)")
        if problems:
            raise PreconditionError("; ".join(problems))

    # --- retry loop ----------------------------------------------------------

    def _generate_with_retries(self, floor_state: Optional[FloorState]) -> GenerationResult:
        settings = self.settings
        base_seed = floor_state.generation_seed if floor_state is not None else None
        warnings: List[str] = []
        attempt = 0

        while True:
            self._run_pass(base_seed, attempt)
            state = self.state
            used = state.used_fraction

            if not state.exit_placed:
                attempt += 1
                if attempt >= settings.max_generation_attempts:
                    self.phase = GenerationPhase.FAILED
                    message = (
                        f"Exit room could not be placed on floor {self.floor_number} "
                        f"after {attempt} attempt(s)"
                    )
                    logger.error(message)
                    result = self._build_result(success=False)
                    result.add_error(message, GenerationPhase.PLACING_EXIT)
                    result.warnings.extend(warnings)
                    return result
                logger.warning(f"Exit not placed (attempt {attempt}), retrying with a new seed")
                continue

            if used >= settings.min_budget_usage_threshold or state.credits_remaining == 0:
                break

            if (not settings.enable_retry_on_incomplete_generation
                    or attempt >= settings.max_generation_attempts - 1):
                message = (
                    f"Accepted under-budget layout: {used:.0%} of credits used "
                    f"(threshold {settings.min_budget_usage_threshold:.0%})"
                )
                logger.warning(message)
                warnings.append(message)
                break

            attempt += 1
            logger.info(
                f"Budget usage {used:.0%} below {settings.min_budget_usage_threshold:.0%}, "
                f"retrying (attempt {attempt + 1}/{settings.max_generation_attempts})"
            )

        self.phase = GenerationPhase.CACHING_OR_REPLAYING
        if floor_state is not None and not floor_state.has_cached_layout:
            floor_state.cached_layout = capture_layout(self.state.placed_rooms, self.catalog)
            logger.debug(f"Cached layout for floor {self.floor_number} "
                         f"({len(floor_state.cached_layout.placements)} rooms)")

        return self._finish(warnings, ValidationStage.GENERATION)

    def _run_pass(self, base_seed: Optional[int], attempt: int) -> None:
        self.phase = GenerationPhase.CLEARING
        self._clear_placed()

        self.phase = GenerationPhase.SEEDING
        if base_seed is not None:
            seed = base_seed + attempt
        else:
            seed = random.randint(0, 2**31 - 1)
        self.rng.set_seed(seed)

        budget = self.settings.door_credit_budget
        self.state = GenerationState(budget=budget, credits_remaining=budget, attempt=attempt, seed=seed)

        self.phase = GenerationPhase.PLACING_START
        self._place_start_room()

        self.phase = GenerationPhase.GROWING
        self._grow()

        self.phase = GenerationPhase.PLACING_EXIT
        self._place_exit_room()

        self.phase = GenerationPhase.SEALING_DEAD_ENDS
        self._seal_dead_ends()

        state = self.state
        logger.info(
            f"Floor {self.floor_number} attempt {attempt + 1} (seed {seed}): "
            f"{len(state.placed_rooms)} rooms, {state.connections_made} connections, "
            f"{state.credits_remaining}/{state.budget} credits left, "
            f"exit {'placed' if state.exit_placed else 'MISSING'}"
        )

    # --- passes --------------------------------------------------------------

    def _clear_placed(self) -> None:
        for room in self.state.placed_rooms:
            self.registry.unregister(room.instance_id)
            room.release()
            self.instantiator.destroy(room)
        self.registry.clear()
        self.state = GenerationState()

    def _register(self, room: RoomInstance) -> None:
        self.registry.register(room.instance_id, room.spatial_record(), room.name)
        self.state.placed_rooms.append(room)

    def _record_connection(self) -> None:
        self.state.credits_remaining -= 1
        self.state.connections_made += 1

    def _place_start_room(self) -> None:
        template = self.catalog.start_room
        rotation = self.origin_rotation * template.geometry.default_rotation
        room = self.instantiator.spawn(template, self.origin_position, rotation, START_ROOM_NAME)
        self._register(room)
        self.state.start_room = room
        self.state.frontier.extend(room.unconnected_sockets())

    def _grow(self) -> None:
        state = self.state
        while state.credits_remaining > 1 and state.frontier:
            index = self.rng.uniform_int(0, len(state.frontier))
            source = state.frontier.pop(index)
            if source.is_connected:
                continue
            room = self._expand_socket(source)
            if room is not None:
                state.frontier.extend(room.unconnected_sockets())

    def _expand_socket(self, source: Socket) -> Optional[RoomInstance]:
        """Try to grow a room off `source`; None leaves the socket to be sealed."""
        for _ in range(self.settings.max_attempts_per_socket):
            template = self.catalog.random_room_with_socket_type(
                source.socket_type, self.rng, self.settings.sector_number)
            if template is None:
                logger.debug(f"No template offers a {source.socket_type.value} socket")
                return None
            name = f"{template.identifier}_{len(self.state.placed_rooms)}"
            room = self._try_attach(source, template, name)
            if room is not None:
                self._record_connection()
                return room
        logger.debug(f"Gave up on {source.qualified_name} after "
                     f"{self.settings.max_attempts_per_socket} attempts")
        return None

    def _try_attach(self, source: Socket, template: RoomTemplate, name: str) -> Optional[RoomInstance]:
        """Place `template` against `source` if it passes both phases."""
        target_spec = template.find_compatible_socket(source.socket_type)
        if target_spec is None:
            return None

        position, rotation = self.resolver.compute_alignment(
            source, target_spec, template.geometry.default_rotation)
        candidate = template.geometry.bounds.world_record(position, rotation)
        if self.registry.query_occupied(candidate, ignore_owner=source.owner.instance_id):
            logger.debug(f"{name} at {source.qualified_name} rejected by broad phase")
            return None

        room = self.instantiator.spawn(template, position, rotation, name)
        target = room.find_matching_socket(target_spec)
        if target is None or not self.resolver.connect_rooms(source, target, room):
            room.release()
            self.instantiator.destroy(room)
            return None

        self._register(room)
        return room

    def _place_exit_room(self) -> None:
        state = self.state
        sockets = [s for room in state.placed_rooms for s in room.unconnected_sockets()]
        self.rng.shuffle(sockets)

        for source in sockets:
            templates = self.catalog.exit_candidates(source.socket_type)
            if not templates:
                continue
            self.rng.shuffle(templates)
            for template in templates:
                room = self._try_attach(source, template, f"{EXIT_NAME_PREFIX}{template.identifier}")
                if room is not None:
                    room.is_exit = True
                    state.exit_room = room
                    state.exit_placed = True
                    self._record_connection()
                    return

        logger.warning(f"No open socket accepted an exit room ({len(sockets)} candidates)")

    def _seal_dead_ends(self) -> None:
        if not self.settings.spawn_blockades:
            return
        for room in self.state.placed_rooms:
            for socket in room.sockets:
                if socket.is_connected:
                    continue
                blockade = socket.spawn_blockade()
                if blockade is not None:
                    self.state.placed_blockades.append(blockade)

    # --- replay --------------------------------------------------------------

    def _replay(self, floor_state: FloorState) -> Optional[GenerationResult]:
        """Rebuild a cached floor verbatim. None means the cache was discarded."""
        self.phase = GenerationPhase.CACHING_OR_REPLAYING
        try:
            resolved = resolve_placements(floor_state.cached_layout, self.catalog)
        except CacheReplayError as e:
            logger.warning(f"Discarding cached layout for floor {self.floor_number}: {e}")
            floor_state.cached_layout = None
            return None

        self.phase = GenerationPhase.CLEARING
        self._clear_placed()

        self.phase = GenerationPhase.CACHING_OR_REPLAYING
        budget = self.settings.door_credit_budget
        state = GenerationState(budget=budget, credits_remaining=budget, seed=floor_state.generation_seed)
        self.state = state

        for placement, template in resolved:
            room = self.instantiator.spawn(
                template, placement.position,
                Quaternion.from_tuple(placement.rotation), placement.instance_name)
            self._register(room)
            if state.start_room is None and template is self.catalog.start_room:
                state.start_room = room
            elif state.exit_room is None and self._is_exit_placement(template, placement.instance_name):
                room.is_exit = True
                state.exit_room = room
                state.exit_placed = True

        self._reconnect_by_proximity()
        # A cache written under a larger budget keeps all of its connections
        state.budget = max(budget, state.connections_made)
        state.credits_remaining = state.budget - state.connections_made

        self.phase = GenerationPhase.SEALING_DEAD_ENDS
        self._seal_dead_ends()

        self.replayed = True
        logger.info(
            f"Replayed floor {self.floor_number}: {len(state.placed_rooms)} rooms, "
            f"{state.connections_made} connections"
        )
        return self._finish([], ValidationStage.REPLAY)

    def _is_exit_placement(self, template: RoomTemplate, instance_name: str) -> bool:
        return (
            template is self.catalog.exit_room
            or template.category == RoomCategory.EXIT_ELEVATOR
            or instance_name.startswith(EXIT_NAME_PREFIX)
        )

    def _reconnect_by_proximity(self) -> None:
        """Connect open sockets that sit on top of each other with matching types."""
        threshold = self.settings.socket_connection_threshold
        sockets = [s for room in self.state.placed_rooms for s in room.sockets]

        for i, socket_a in enumerate(sockets):
            if socket_a.is_connected:
                continue
            for socket_b in sockets[i + 1:]:
                if socket_b.is_connected or socket_b.owner is socket_a.owner:
                    continue
                if not socket_a.is_compatible_with(socket_b):
                    continue
                if distance(socket_a.position, socket_b.position) > threshold:
                    continue
                if self.resolver.connect_in_place(socket_a, socket_b):
                    self.state.connections_made += 1
                    break

    # --- completion ----------------------------------------------------------

    def _finish(self, warnings: List[str], stage: ValidationStage) -> GenerationResult:
        bounds = self.registry.combined_bounds()
        if bounds is not None:
            self.navigation.rebuild(bounds, self.settings.nav_padding)
        else:
            logger.warning("No rooms registered, skipping navigation rebuild")

        result = self._build_result(success=True)
        result.warnings.extend(warnings)

        if self.settings.validate_after_generation:
            state = self.state
            validation = validate_floor_layout(
                state.placed_rooms, state.start_room, state.budget,
                state.credits_remaining, state.connections_made,
                self.settings.max_source_overlap_fraction, stage=stage,
            )
            result.validation = validation
            # Validation failures are reported, not fatal
            for issue in validation.errors:
                result.add_warning(issue.format())
            for issue in validation.warnings:
                logger.warning(f"Validation: {issue.code}: {issue.message}")

        self.phase = GenerationPhase.DONE
        return result

    def _build_result(self, success: bool) -> GenerationResult:
        state = self.state
        return GenerationResult(
            success=success,
            floor_number=self.floor_number,
            seed=state.seed,
            attempts=state.attempt + 1,
            room_count=len(state.placed_rooms),
            connections_made=state.connections_made,
            credits_remaining=state.credits_remaining,
            budget=state.budget,
            replayed=self.replayed,
        )
