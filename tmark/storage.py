import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from tmark.errors import (
    ConfigError,
    InvalidAliasError,
    StoreCorruptedError,
    StoreError,
    UnknownAliasError,
)
from tmark.models import AliasEntry
from tmark.paths import resolve_path
from tmark.search import DEFAULT_THRESHOLD, suggest_aliases

logger = logging.getLogger(__name__)

STORE_FILENAME = "bookmarks.jsonl"

_WHITESPACE = re.compile(r"\s")


def validate_alias(alias: str) -> str:
    """Return ``alias`` unchanged if it is usable as a bookmark name"""
    if not alias:
        raise InvalidAliasError("Alias must not be empty")
    if _WHITESPACE.search(alias):
        raise InvalidAliasError(f"Alias must not contain whitespace: {alias!r}")
    return alias


class AliasStorage:
    """Persist bookmarks as one JSON record per line.

    The file is re-read on every call so that separate invocations always
    see each other's writes. Mutations rewrite the whole file through a
    temporary file and an atomic rename. There is no locking: two
    concurrent writers race and the last one wins.
    """

    def __init__(self, store_dir: Union[str, Path], fuzzy_threshold: int = DEFAULT_THRESHOLD):
        self.store_dir = Path(store_dir)
        if not self.store_dir.is_dir():
            raise ConfigError(f"Store directory does not exist: {self.store_dir}")
        self.storage_path = self.store_dir / STORE_FILENAME
        self.fuzzy_threshold = fuzzy_threshold

    def load(self) -> List[AliasEntry]:
        """Read all entries from disk in stored order"""
        if not self.storage_path.exists():
            return []

        entries: List[AliasEntry] = []
        try:
            with open(self.storage_path, "rb") as f:
                for line_number, raw in enumerate(f, start=1):
                    try:
                        line = raw.decode("utf-8")
                    except UnicodeDecodeError as e:
                        raise StoreCorruptedError(self.storage_path, line_number, "invalid UTF-8") from e
                    if not line.strip():
                        continue
                    entries.append(self._parse_line(line, line_number))
        except OSError as e:
            raise StoreError(f"Cannot read {self.storage_path}: {e}") from e
        return entries

    def _parse_line(self, line: str, line_number: int) -> AliasEntry:
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(self.storage_path, line_number, f"invalid JSON ({e.msg})") from e
        if not isinstance(data, dict) or "alias" not in data or "path" not in data:
            raise StoreCorruptedError(self.storage_path, line_number, "record needs 'alias' and 'path'")
        for key in ("alias", "path"):
            if not isinstance(data[key], str):
                raise StoreCorruptedError(self.storage_path, line_number, f"'{key}' must be a string")
        if not isinstance(data.get("created_at", ""), str):
            raise StoreCorruptedError(self.storage_path, line_number, "'created_at' must be a string")
        try:
            return AliasEntry.from_dict(data)
        except (TypeError, ValueError) as e:
            raise StoreCorruptedError(self.storage_path, line_number, str(e)) from e

    def save(self, entries: List[AliasEntry]) -> None:
        """Replace the backing file with ``entries``"""
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.store_dir, prefix=".bookmarks.", suffix=".tmp")
        except OSError as e:
            raise StoreError(f"Cannot write {self.storage_path}: {e}") from e
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                for entry in entries:
                    f.write(json.dumps(entry.to_dict(), ensure_ascii=False))
                    f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.storage_path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Cannot write {self.storage_path}: {e}") from e
        logger.debug("Wrote %d bookmark(s) to %s", len(entries), self.storage_path)

    def add(self, alias: str, raw_path: Optional[Union[str, Path]] = None, cwd: Optional[Path] = None) -> AliasEntry:
        """Bookmark a directory, overwriting an existing alias in place"""
        validate_alias(alias)
        path = resolve_path(raw_path, cwd=cwd)
        entry = AliasEntry(alias=alias, path=str(path))
        self.put(entry)
        return entry

    def put(self, entry: AliasEntry) -> bool:
        """Store an already-canonical entry, return True if it replaced one"""
        validate_alias(entry.alias)
        entries = self.load()
        replaced = False
        for i, existing in enumerate(entries):
            if existing.alias == entry.alias:
                entries[i] = entry
                replaced = True
                break
        if not replaced:
            entries.append(entry)
        self.save(entries)
        logger.debug("%s %s -> %s", "Updated" if replaced else "Added", entry.alias, entry.path)
        return replaced

    def remove(self, alias: str) -> AliasEntry:
        """Remove an alias and return the entry it pointed to"""
        entries = self.load()
        for i, entry in enumerate(entries):
            if entry.alias == alias:
                del entries[i]
                self.save(entries)
                logger.debug("Removed %s", alias)
                return entry
        raise self._unknown(alias, entries)

    def get(self, alias: str) -> AliasEntry:
        """Get an entry by alias"""
        entries = self.load()
        for entry in entries:
            if entry.alias == alias:
                return entry
        raise self._unknown(alias, entries)

    def exists(self, alias: str) -> bool:
        return any(entry.alias == alias for entry in self.load())

    def list_all(self) -> List[AliasEntry]:
        """Get all entries in insertion order"""
        return self.load()

    def _unknown(self, alias: str, entries: List[AliasEntry]) -> UnknownAliasError:
        suggestions = suggest_aliases(alias, (e.alias for e in entries), threshold=self.fuzzy_threshold)
        return UnknownAliasError(alias, suggestions)
