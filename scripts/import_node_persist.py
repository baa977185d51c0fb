"""Import a node-persist directory (one JSON file per key) → SQLite key-value store."""

import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.storage import Storage  # noqa: E402

logger = logging.getLogger(__name__)

IMPORTED_SUFFIXES = ("_msg_template", "_owner_id")


def _read_entry(path: Path) -> tuple[str, object] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Skipping unreadable file %s: %s", path, exc)
        return None

    if not isinstance(data, dict) or "key" not in data or "value" not in data:
        logger.warning("Skipping %s: not a node-persist entry", path)
        return None
    return str(data["key"]), data["value"]


async def _store_entries(persistence_path: str, entries: list[tuple[str, object]]) -> int:
    storage = Storage.init(persistence_path)
    try:
        for key, value in entries:
            await storage.set_item(key, value)
    finally:
        storage.close()
    return len(entries)


def migrate(source_dir: str = ".node-persist/storage", persistence_path: str = ".persistence") -> int:
    src = Path(source_dir)
    if not src.is_dir():
        print(f"Source directory {source_dir} not found, nothing to migrate.")
        return 0

    entries: list[tuple[str, object]] = []

    for path in sorted(src.iterdir()):
        if not path.is_file():
            continue
        entry = _read_entry(path)
        if entry is None:
            continue

        key, value = entry
        if not key.endswith(IMPORTED_SUFFIXES) or value in (None, ""):
            continue

        entries.append((key, value))

    migrated = asyncio.run(_store_entries(persistence_path, entries))
    print(f"Migration complete: {migrated} entr(y/ies) imported from {source_dir} → {persistence_path}")
    return migrated


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate(*sys.argv[1:3])
