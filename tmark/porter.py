import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import yaml

from tmark.errors import InvalidAliasError, InvalidPathError, StoreError
from tmark.models import AliasEntry
from tmark.paths import resolve_path
from tmark.storage import AliasStorage, validate_alias

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


class BookmarkPorter:
    """Handle import and export of bookmarks"""

    def __init__(self, storage: AliasStorage):
        self.storage = storage

    def export_to_dict(self, entries: List[AliasEntry] = None) -> Dict[str, Any]:
        """Export bookmarks to a dictionary format"""
        if entries is None:
            entries = self.storage.list_all()

        return {
            "version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "count": len(entries),
            "bookmarks": [entry.to_dict() for entry in entries],
        }

    def export_to_file(self, filepath: Path, format: str = "json") -> tuple[bool, str]:
        """Export bookmarks to a file"""
        data = self.export_to_dict()

        try:
            if format == "yaml":
                with open(filepath, "w") as f:
                    yaml.dump(data, f, default_flow_style=False, sort_keys=False)
            else:  # json
                with open(filepath, "w") as f:
                    json.dump(data, f, indent=2, default=str)
        except OSError as e:
            return False, f"Export failed: {e}"

        return True, f"Exported {data['count']} bookmarks to {filepath.name}"

    def import_from_file(self, filepath: Path, replace: bool = False) -> tuple[bool, str]:
        """Import bookmarks from a file.

        Every path is canonicalized again on this machine; records whose
        directory does not exist here are skipped. Imported aliases overwrite
        existing ones. With ``replace`` the store ends up holding only the
        imported bookmarks.
        """
        if not filepath.exists():
            return False, f"File not found: {filepath}"

        try:
            with open(filepath, "r") as f:
                if filepath.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            return False, f"Import failed: {e}"

        if not isinstance(data, dict) or not isinstance(data.get("bookmarks"), list):
            return False, "Invalid format: missing 'bookmarks' field"

        imported: List[AliasEntry] = []
        invalid: List[str] = []
        for record in data["bookmarks"]:
            if not isinstance(record, dict):
                invalid.append(repr(record))
                continue
            alias = str(record.get("alias", ""))
            if not record.get("path"):
                invalid.append(alias or repr(record))
                continue
            try:
                validate_alias(alias)
                path = resolve_path(record["path"], cwd=filepath.parent)
            except (InvalidAliasError, InvalidPathError) as e:
                logger.debug("Skipping %r: %s", record, e)
                invalid.append(alias or repr(record))
                continue
            imported.append(AliasEntry(alias=alias, path=str(path)))

        entries = [] if replace else self.storage.list_all()
        positions = {entry.alias: i for i, entry in enumerate(entries)}
        for entry in imported:
            if entry.alias in positions:
                entries[positions[entry.alias]] = entry
            else:
                positions[entry.alias] = len(entries)
                entries.append(entry)

        try:
            self.storage.save(entries)
        except StoreError as e:
            return False, f"Import failed: {e}"

        msg = f"Imported {len(imported)} bookmarks"
        if invalid:
            msg += f" (skipped {len(invalid)} invalid: {', '.join(invalid)})"
        return True, msg
