"""Canonicalization of user-supplied directory paths"""

import logging
from pathlib import Path
from typing import Optional, Union

from tmark.errors import InvalidPathError

logger = logging.getLogger(__name__)


def resolve_path(raw_path: Optional[Union[str, Path]] = None, cwd: Optional[Path] = None) -> Path:
    """Resolve a raw path argument to an absolute, symlink-free directory.

    An empty or missing ``raw_path`` means the current working directory.
    Relative paths are taken relative to ``cwd`` (defaults to the process
    working directory). Two spellings of the same directory always resolve
    to the same path, which is what lets ``go`` find the session again.

    Raises:
        InvalidPathError: if the result does not exist or is not a directory.
    """
    try:
        base = Path(cwd) if cwd is not None else Path.cwd()
        if raw_path is None or str(raw_path).strip() == "":
            candidate = base
        else:
            candidate = Path(raw_path).expanduser()
            if not candidate.is_absolute():
                candidate = base / candidate
        resolved = candidate.resolve()
        exists, is_dir = resolved.exists(), resolved.is_dir()
    except (RuntimeError, OSError, ValueError, TypeError) as e:
        # unknown ~user, symlink loop, NUL byte, non-string value
        raise InvalidPathError(f"Invalid path {raw_path!r}: {e}") from e
    logger.debug("Resolved %r to %s", str(raw_path) if raw_path is not None else None, resolved)

    if not exists:
        raise InvalidPathError(f"Path does not exist: {resolved}")
    if not is_dir:
        raise InvalidPathError(f"Not a directory: {resolved}")
    return resolved
