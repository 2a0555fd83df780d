"""Error types raised by tmark"""

from typing import List, Optional


class TmarkError(Exception):
    """Base class for all tmark errors"""

    exit_code = 1


class InvalidAliasError(TmarkError):
    """Alias name is empty or contains whitespace"""

    exit_code = 2


class InvalidPathError(TmarkError):
    """Path does not exist or is not a directory"""

    exit_code = 3


class UnknownAliasError(TmarkError):
    """No bookmark is stored under the given alias"""

    exit_code = 4

    def __init__(self, alias: str, suggestions: Optional[List[str]] = None):
        self.alias = alias
        self.suggestions = suggestions or []
        super().__init__(f"Alias '{alias}' not found")


class StalePathError(TmarkError):
    """The directory behind a bookmark was moved or deleted"""

    exit_code = 5

    def __init__(self, alias: str, path: str):
        self.alias = alias
        self.path = path
        super().__init__(
            f"Directory for '{alias}' no longer exists: {path}\n"
            f"Run 'tmark remove {alias}' to drop the bookmark"
        )


class MultiplexerError(TmarkError):
    """A tmux invocation failed"""

    exit_code = 6


class StoreError(TmarkError):
    """The bookmark file could not be read or written"""

    exit_code = 7


class StoreCorruptedError(StoreError):
    """The bookmark file contains a malformed record"""

    def __init__(self, path, line_number: int, reason: str):
        self.path = path
        self.line_number = line_number
        super().__init__(f"{path}:{line_number}: {reason}")


class ConfigError(TmarkError):
    """Store directory is missing or unusable"""

    exit_code = 8
