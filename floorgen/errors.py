"""
Exception hierarchy for floor generation.

Precondition problems are raised before a generation pass touches any
state. Per-socket placement failures are never raised; they are absorbed
by the generator and the socket is sealed instead.
"""


class FloorGenError(Exception):
    pass


class PreconditionError(FloorGenError):
    """Catalog, settings or seed source are not usable for generation."""
    pass


class DuplicateRegistration(FloorGenError):
    """An owner was registered twice in the occupancy registry."""

    def __init__(self, owner_id: int, name: str = ""):
        self.owner_id = owner_id
        label = f" ({name})" if name else ""
        super().__init__(f"Owner {owner_id}{label} is already registered")


class CacheReplayError(FloorGenError):
    """A cached layout cannot be replayed and must be discarded."""
    pass


class GenerationInProgressError(FloorGenError):
    pass
