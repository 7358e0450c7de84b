"""
Room catalog persistence.

A catalog file holds every template with its geometry, with the designated
start and exit rooms stored separately:

    {
      "name": "station",
      "start_room": {...template...},
      "exit_room": {...template...},
      "rooms": [{...template...}, ...]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .catalog import RoomCatalog
from .room_types import RoomTemplate

logger = logging.getLogger(__name__)


def _catalog_to_dict(catalog: RoomCatalog) -> Dict[str, Any]:
    """Convert a RoomCatalog to a JSON-serializable dictionary."""
    return {
        "name": catalog.name,
        "start_room": catalog.start_room.to_dict() if catalog.start_room else None,
        "exit_room": catalog.exit_room.to_dict() if catalog.exit_room else None,
        "rooms": [t.to_dict() for t in catalog.rooms],
    }


def _dict_to_catalog(data: Dict[str, Any]) -> RoomCatalog:
    """Create a RoomCatalog from a dictionary."""
    start = data.get("start_room")
    exit_room = data.get("exit_room")
    catalog = RoomCatalog(
        name=data.get("name", "default"),
        start_room=RoomTemplate.from_dict(start) if start else None,
        exit_room=RoomTemplate.from_dict(exit_room) if exit_room else None,
    )
    for entry in data.get("rooms", []):
        catalog.register(RoomTemplate.from_dict(entry))
    return catalog


def save_catalog(catalog: RoomCatalog, file_path: Path) -> Path:
    """
    Write a catalog as JSON.

    Raises:
        OSError: If the file cannot be written
    """
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(_catalog_to_dict(catalog), f, indent=2)
    return file_path


def load_catalog_from_path(file_path: Path) -> Optional[RoomCatalog]:
    """
    Load a catalog from a JSON file.

    Returns:
        RoomCatalog if the file parses, None otherwise. Whether the catalog
        is usable for generation is checked separately by RoomCatalog.validate().
    """
    if not file_path.exists():
        logger.warning(f"Catalog file not found: {file_path}")
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return _dict_to_catalog(data)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Failed to load catalog {file_path}: {e}")
        return None
