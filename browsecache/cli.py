"""Command-line inspection of cached summaries.

Resolves an identifier against the configured storage root and prints the
matching summary as JSON. Reading through the CLI warms the cache exactly
like a page render would.
"""

from __future__ import annotations

import argparse
import json
import math
import sys
from dataclasses import asdict
from pathlib import Path

from .cache import SummaryCache
from .config import load_config
from .errors import ConfigError
from .identifiers import create_path, parse_identifier
from .log import configure_logging
from .storage import is_valid_name


def _positive_float(value: str) -> float:
    """argparse type for positive finite float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def describe(cache: SummaryCache, identifier: str | None) -> object:
    """Return a JSON-compatible view of what ``identifier`` names.

    No identifier lists all users. Past the solution, a generated file gives
    its file summary and a folder gives its listing; any other path falls
    back to the solution summary.
    """
    info = parse_identifier(identifier)
    if info is None:
        return [asdict(user) for user in cache.get_all_users()]
    if not info.repo:
        return asdict(cache.get_user_summary(info.user))
    if not info.solution:
        return asdict(cache.get_repo_summary(info.user, info.repo))
    if info.file_path and all(is_valid_name(name) for name in (info.user, info.repo, info.solution)):
        storage = cache.storage
        relative = create_path(info.user, info.repo, info.solution, info.file_path)
        if storage.is_file(relative):
            return asdict(cache.get_file_summary(info.user, info.repo, info.solution, info.file_path))
        if storage.is_folder(relative):
            return {
                "folders": [path.name for path in storage.find_folders(relative)],
                "files": [path.name for path in storage.find_files(relative)],
            }
    return asdict(cache.get_solution_summary(info.user, info.repo, info.solution))


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, print the requested summary, and wait for refreshes."""
    parser = argparse.ArgumentParser(description="Show cached source-browser summaries as JSON.")
    parser.add_argument("identifier", nargs="?", default=None, help="user[/repo[/solution[/path]]]. Defaults to all users.")
    parser.add_argument("--root", type=Path, default=None, help="Storage root (overrides config file).")
    parser.add_argument(
        "--max-age",
        type=_positive_float,
        default=None,
        help="Seconds before a sidecar counts as stale (overrides config file).",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument("--verbose", action="store_true", help="Log cache activity to stderr.")
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)
    try:
        config = load_config(args.config).with_overrides(
            storage_root=args.root,
            max_age_seconds=args.max_age,
        )
    except ConfigError as exc:
        parser.exit(2, f"browsecache: {exc}\n")

    cache = SummaryCache(config)
    if not cache.storage.exists():
        parser.exit(2, f"browsecache: storage root not found: {config.storage_root}\n")

    try:
        payload = describe(cache, args.identifier)
    except (OSError, ValueError) as exc:
        parser.exit(1, f"browsecache: cannot load {args.identifier}: {exc}\n")
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    # Let a triggered refresh land before the process exits.
    cache.refresher.wait_idle(timeout=30.0)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
