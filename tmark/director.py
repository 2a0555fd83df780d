"""Turn a bookmark into a live tmux session"""

import hashlib
import logging
import re
from pathlib import Path

from tmark.errors import StalePathError
from tmark.models import SessionTarget
from tmark.multiplexer import Multiplexer
from tmark.storage import AliasStorage

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def session_name_for(path: str, prefix: str = "") -> str:
    """Derive the session name for a canonical directory path.

    The name is the sanitized directory name plus a short hash of the full
    path, so it is stable across calls and distinct for directories that
    share a basename. tmux rejects '.' and ':' in session names, so the
    prefix is sanitized the same way as the directory name.
    """
    prefix = _UNSAFE_CHARS.sub("_", str(prefix or ""))
    base = _UNSAFE_CHARS.sub("_", Path(path).name) or "root"
    digest = hashlib.sha1(path.encode("utf-8")).hexdigest()[:8]
    return f"{prefix}{base}-{digest}"


class SessionDirector:
    """Attach to, or create, the session behind an alias"""

    def __init__(self, storage: AliasStorage, multiplexer: Multiplexer, prefix: str = ""):
        self.storage = storage
        self.multiplexer = multiplexer
        self.prefix = prefix

    def target_for(self, alias: str) -> SessionTarget:
        """Look up ``alias`` and compute its session target.

        A bookmark whose directory has disappeared raises StalePathError and
        is left in the store for the user to remove.
        """
        entry = self.storage.get(alias)
        if not Path(entry.path).is_dir():
            raise StalePathError(alias, entry.path)
        return SessionTarget(
            alias=entry.alias,
            path=entry.path,
            session_name=session_name_for(entry.path, self.prefix),
        )

    def ensure_session(self, target: SessionTarget) -> bool:
        """Create the target's session if missing, return True if created"""
        if target.session_name in self.multiplexer.list_sessions():
            logger.debug("Session %s already running", target.session_name)
            return False
        logger.debug("Creating session %s in %s", target.session_name, target.path)
        self.multiplexer.create_session(target.session_name, target.path)
        return True

    def go(self, alias: str, attach: bool = True) -> SessionTarget:
        """Switch the terminal to the session for ``alias``.

        With the tmux backend the attach step replaces the current process,
        so this only returns when ``attach`` is False or a test double is
        in use.
        """
        target = self.target_for(alias)
        self.ensure_session(target)
        if attach:
            self.multiplexer.attach_session(target.session_name)
        return target
