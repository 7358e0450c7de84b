"""
Generator settings.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional, get_args


@dataclass
class GeneratorSettings:
    # Budget: each room-to-room connection spends one credit
    door_credit_budget: int = 20
    door_template: Optional[str] = "Door_Standard"

    # Retry policy
    enable_retry_on_incomplete_generation: bool = True
    max_generation_attempts: int = 3
    min_budget_usage_threshold: float = 0.8
    max_attempts_per_socket: int = 5

    # Seeding (off = fresh non-deterministic seed every pass)
    use_seed_based_generation: bool = True

    # Placement
    max_source_overlap_fraction: float = 0.15
    sector_number: Optional[int] = None

    # Replay: sockets closer than this with matching types are reconnected
    socket_connection_threshold: float = 0.5

    spawn_blockades: bool = True
    nav_padding: float = 1.0
    validate_after_generation: bool = True

    def validate(self) -> List[str]:
        """Return a list of problems; empty when the settings are usable."""
        problems = []
        if self.door_credit_budget < 1:
            problems.append("door_credit_budget must be at least 1 (one credit is reserved for the exit)")
        if self.max_generation_attempts < 1:
            problems.append("max_generation_attempts must be at least 1")
        if self.max_attempts_per_socket < 1:
            problems.append("max_attempts_per_socket must be at least 1")
        if not 0.0 <= self.min_budget_usage_threshold <= 1.0:
            problems.append("min_budget_usage_threshold must be within [0, 1]")
        if not 0.0 <= self.max_source_overlap_fraction <= 1.0:
            problems.append("max_source_overlap_fraction must be within [0, 1]")
        if self.socket_connection_threshold < 0.0:
            problems.append("socket_connection_threshold must not be negative")
        if self.nav_padding < 0.0:
            problems.append("nav_padding must not be negative")
        return problems

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeneratorSettings':
        """Build settings from a dict, ignoring unknown keys.

        Values are converted to the declared field types, so "20" loads as 20.

        Raises:
            TypeError: If data is not a mapping
            ValueError: If a value cannot be converted
        """
        if not isinstance(data, dict):
            raise TypeError(f"Settings must be a JSON object, got {type(data).__name__}")
        values = {}
        for f in fields(cls):
            if f.name in data:
                values[f.name] = _coerce(f.name, data[f.name], f.type)
        return cls(**values)


def _coerce(name: str, value: Any, declared: Any) -> Any:
    args = get_args(declared)
    if type(None) in args:
        if value is None:
            return None
        declared = next(a for a in args if a is not type(None))

    if declared is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        raise ValueError(f"{name} must be true or false, got {value!r}")
    if isinstance(value, bool) and declared in (int, float):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if declared is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be a whole number, got {value!r}")

    try:
        return declared(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be {declared.__name__}, got {value!r}") from None
