"""
Command line front end.

Usage:
    python main.py --seed 12345 --floor 1 --floor 2
    python main.py --seed 12345 --floor 3 --revisit --diag
    python main.py --catalog rooms.json --budget 30 --json
"""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from floorgen.config import GeneratorSettings, load_settings_from_path
from floorgen.errors import PreconditionError
from floorgen.generators.builtin import create_default_catalog
from floorgen.generators.catalog import RoomCatalog
from floorgen.generators.catalog_storage import load_catalog_from_path, save_catalog
from floorgen.pipeline import FloorGenerator, FloorStateManager, GenerationResult
from floorgen.validation import room_overlap_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_GENERATION_FAILED = 1
EXIT_PRECONDITION = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate station floor layouts from room templates."
    )
    parser.add_argument("--seed", type=int, default=0,
                        help="World seed (0 picks a random one).")
    parser.add_argument("--floor", type=int, action="append", dest="floors",
                        help="Floor number to generate; repeat for several floors (default 1).")
    parser.add_argument("--budget", type=int, default=None,
                        help="Door credit budget per floor.")
    parser.add_argument("--catalog", type=Path, default=None,
                        help="Room catalog JSON (default: built-in station rooms).")
    parser.add_argument("--settings", type=Path, default=None,
                        help="Generator settings JSON.")
    parser.add_argument("--revisit", action="store_true",
                        help="Mark each floor visited and generate it again from its cached layout.")
    parser.add_argument("--state-in", type=Path, default=None,
                        help="Load floor states (seed and cached layouts) from this file.")
    parser.add_argument("--state-out", type=Path, default=None,
                        help="Save floor states to this file when done.")
    parser.add_argument("--dump-catalog", type=Path, default=None,
                        help="Write the catalog in use to this file and exit.")
    parser.add_argument("--diag", action="store_true",
                        help="Print the room overlap diagnostics for each floor.")
    parser.add_argument("--json", action="store_true",
                        help="Print results as JSON.")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging.")
    return parser


def _load_catalog(path: Optional[Path]) -> Optional[RoomCatalog]:
    if path is None:
        return create_default_catalog()
    return load_catalog_from_path(path)


def _load_settings(args: argparse.Namespace) -> Optional[GeneratorSettings]:
    settings = GeneratorSettings()
    if args.settings is not None:
        settings = load_settings_from_path(args.settings)
        if settings is None:
            return None
    if args.budget is not None:
        settings.door_credit_budget = args.budget
    return settings


def _format_result(result: GenerationResult, generator: FloorGenerator) -> str:
    status = "OK" if result.success else "FAILED"
    mode = "replayed" if result.replayed else f"attempt {result.attempts}"
    lines = [
        f"Floor {result.floor_number}: {status} (seed {result.seed}, {mode})",
        f"  rooms={result.room_count} connections={result.connections_made} "
        f"credits={result.credits_remaining}/{result.budget} used={result.used_fraction:.0%} "
        f"blockades={len(generator.blockades)}",
    ]
    for room in generator.rooms:
        x, y, z = room.position
        marker = " [exit]" if room.is_exit else ""
        lines.append(f"    {room.name:<28} ({x:7.2f}, {y:5.2f}, {z:7.2f}) "
                     f"yaw={room.rotation.yaw_degrees():5.1f}{marker}")
    for error in result.errors:
        lines.append(f"  ERROR: {error}")
    for warning in result.warnings:
        lines.append(f"  WARNING: {warning}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    catalog = _load_catalog(args.catalog)
    if catalog is None:
        print(f"ERROR: could not load catalog {args.catalog}")
        return EXIT_PRECONDITION

    if args.dump_catalog is not None:
        save_catalog(catalog, args.dump_catalog)
        print(f"Catalog written to {args.dump_catalog}")
        return EXIT_OK

    settings = _load_settings(args)
    if settings is None:
        print(f"ERROR: could not load settings {args.settings}")
        return EXIT_PRECONDITION

    floor_states = FloorStateManager()
    if args.state_in is None or not floor_states.load_from_json(args.state_in):
        floor_states.initialize(args.seed)

    generator = FloorGenerator(catalog, floor_states, settings)
    floors = args.floors or [1]
    results = []
    exit_code = EXIT_OK

    try:
        for floor_number in floors:
            passes = [False, True] if args.revisit else [False]
            for revisit in passes:
                if revisit:
                    floor_states.mark_floor_visited(floor_number)
                result = generator.generate(floor_number)
                results.append(result)
                if not args.json:
                    print(_format_result(result, generator))
                    if args.diag:
                        print(room_overlap_report(generator.rooms))
                if not result.success:
                    exit_code = EXIT_GENERATION_FAILED
    except PreconditionError as e:
        print(f"ERROR: {e}")
        return EXIT_PRECONDITION

    if args.json:
        print(json.dumps({
            'world_seed': floor_states.world_seed,
            'catalog': catalog.statistics().summary(),
            'results': [r.to_dict() for r in results],
        }, indent=2))
    else:
        print(floor_states.session_stats())

    if args.state_out is not None:
        floor_states.save_to_json(args.state_out)

    return exit_code
