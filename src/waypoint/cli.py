"""Command Line Interface for the grid search engine.

This module drives a single paced search run from the command line. The
terrain matrix is given either as a direct JSON string or as a file path
prefixed with '@'; the result is printed as JSON.

The CLI supports the following commands:
    - search: Search a path between two cells of a terrain matrix

Exit status is 0 when a path was found, 1 when the goal is unreachable and
2 when the input is rejected.

Example Usage:
    python -m waypoint search '[[0,0,0],[0,1,0],[0,0,0]]' --start 0 0 --goal 2 2
    python -m waypoint search @maps/level1.json --start 0 0 --goal 15 1 --mode dijkstra
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from .core.enums import SearchMode
from .core.exceptions import ConfigurationError
from .core.grid import Grid
from .core.search import SearchConfig, SearchEngine, SearchResult
from .core.search.utils import HEURISTICS

EXIT_FOUND = 0
EXIT_NO_PATH = 1
EXIT_INVALID = 2


def parse_json_input(json_str: str) -> Any:
    """Parse JSON input from either a string or file.

    Args:
        json_str (str): Either a JSON string or a file path prefixed with '@'.
                       Relative file paths are resolved against the current
                       working directory.

    Returns:
        Any: Parsed JSON data.

    Raises:
        ValueError: If the JSON is invalid or the specified file is not found.
    """
    if json_str.startswith("@"):
        file_path = json_str[1:]
        if not os.path.isabs(file_path):
            file_path = os.path.join(os.getcwd(), file_path)

        if not os.path.exists(file_path):
            raise ValueError(f"File not found: {file_path}")

        with open(file_path, "r") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {file_path}: {e}")

    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON input: {e}")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="waypoint", description="Stepwise grid search")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    search = subparsers.add_parser("search", help="Search a path through a terrain matrix")
    search.add_argument("matrix", help="JSON string or @filename containing the terrain matrix")
    search.add_argument("--start", nargs=2, type=int, required=True, metavar=("X", "Y"))
    search.add_argument("--goal", nargs=2, type=int, required=True, metavar=("X", "Y"))
    search.add_argument(
        "--mode",
        default=SearchMode.A_STAR.value,
        choices=[mode.value for mode in SearchMode],
        help="Search strategy",
    )
    search.add_argument(
        "--heuristic",
        default="octile",
        choices=sorted(HEURISTICS),
        help="Distance estimate for greedy best-first and A*",
    )
    search.add_argument(
        "--step-delay",
        type=float,
        default=0.0,
        help="Seconds to pause between steps",
    )
    search.add_argument(
        "--no-exit-on-goal",
        dest="exit_on_goal",
        action="store_false",
        help="Keep expanding after the goal is reached",
    )
    return parser


async def run_search(args: argparse.Namespace) -> SearchResult:
    """Build the grid and drive one paced search run.

    Args:
        args (argparse.Namespace): Parsed ``search`` arguments.

    Returns:
        SearchResult: Outcome of the run.

    Raises:
        ValueError: If the matrix input cannot be parsed.
        ConfigurationError: If the grid, endpoints or options are rejected.
    """
    matrix = parse_json_input(args.matrix)
    grid = Grid.build(matrix)
    config = SearchConfig(
        exit_on_goal=args.exit_on_goal,
        heuristic=args.heuristic,
        step_delay=args.step_delay,
    )
    engine = SearchEngine(config)
    engine.init(grid, tuple(args.start), tuple(args.goal), SearchMode(args.mode))
    return await engine.run()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Args:
        argv: Arguments without the program name, defaults to ``sys.argv[1:]``.

    Returns:
        int: Process exit status.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_INVALID

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = asyncio.run(run_search(args))
    except (ValueError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID

    print(json.dumps(result.to_dict(), indent=2))
    return EXIT_FOUND if result.found else EXIT_NO_PATH
