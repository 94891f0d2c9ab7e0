#!/usr/bin/env python3
"""Import treasures into config.json and, optionally, into the database.

The input is a JSON list of treasures (name, clue, x, y, description and
optionally id and picture_url). Entries are merged into the "treasures"
seed list by id; with --apply the database is seeded as well, which only
happens while the treasures table is still empty.
"""

import argparse
import json
import os
import shutil
import sys
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logic.config import CONFIG_PATH, ensure_treasure_fields, load_config, save_config  # noqa: E402

REQUIRED_FIELDS = ("name", "clue", "x", "y")


def read_treasures(path: str) -> list:
    """Read and check the treasure list from a JSON file.

    Args:
        path: Path to a JSON file holding a list of treasure objects.

    Returns:
        The list of treasures with optional fields filled in.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            treasures = json.load(f)
    except FileNotFoundError:
        print(f"Error: Treasure file not found at {path}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in treasure file: {e}")
        sys.exit(1)

    if not isinstance(treasures, list):
        print("Error: Treasure file must contain a JSON list")
        sys.exit(1)

    for index, treasure in enumerate(treasures):
        missing = [k for k in REQUIRED_FIELDS if k not in treasure]
        if missing:
            print(f"Error: Treasure #{index} is missing {', '.join(missing)}")
            sys.exit(1)
        ensure_treasure_fields(treasure)

    return treasures


def merge_treasures(config: dict, treasures: list) -> int:
    """Merge treasures into the config seed list, replacing entries by id.

    Returns:
        Number of entries added or replaced.
    """
    existing = config["treasures"]
    index_by_id = {t.get("id"): i for i, t in enumerate(existing) if t.get("id")}

    for treasure in treasures:
        treasure_id = treasure.get("id")
        if treasure_id in index_by_id:
            existing[index_by_id[treasure_id]] = treasure
        else:
            existing.append(treasure)

    return len(treasures)


def seed(treasure_path: str, config_path: str, backup: bool = True, apply: bool = False):
    """Import treasures into config.json.

    Args:
        treasure_path: JSON file with the treasures to import.
        config_path: Path to config.json.
        backup: Whether to create a backup before writing.
        apply: Also seed the database.
    """
    print(f"Importing {treasure_path} into {config_path}...")

    treasures = read_treasures(treasure_path)
    config = load_config(config_path)

    if backup and os.path.exists(config_path):
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = f"{config_path}.backup_{timestamp}"
        shutil.copyfile(config_path, backup_path)
        print(f"Backup created at {backup_path}")

    count = merge_treasures(config, treasures)
    save_config(config, config_path)
    print(f"  - Merged {count} treasures ({len(config['treasures'])} in seed list)")

    if apply:
        from database import init_db, seed_treasures

        init_db()
        inserted = seed_treasures(config)
        if inserted:
            print(f"  - Inserted {inserted} treasures into the database")
        else:
            print("  - Database already has treasures; nothing inserted")


def main():
    """Main entry point for the seeding script."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("treasures", help="JSON file with a list of treasures")
    parser.add_argument("--config", default=CONFIG_PATH, help="Path to config.json")
    parser.add_argument("--no-backup", action="store_true", help="Skip the config backup")
    parser.add_argument("--apply", action="store_true", help="Also seed the database")
    args = parser.parse_args()

    seed(args.treasures, args.config, backup=not args.no_backup, apply=args.apply)


if __name__ == "__main__":
    main()
