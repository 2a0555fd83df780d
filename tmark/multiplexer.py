"""Terminal multiplexer backends"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import List

from tmark.errors import MultiplexerError

logger = logging.getLogger(__name__)

# stderr fragments tmux prints when no server is running yet
_NO_SERVER_MARKERS = ("no server running", "error connecting", "no sessions")


# Backend Interface
class Multiplexer(ABC):
    @abstractmethod
    def list_sessions(self) -> List[str]:
        """Return the names of all running sessions."""
        ...

    @abstractmethod
    def create_session(self, name: str, path: str) -> None:
        """Create a detached session called ``name`` rooted at ``path``."""
        ...

    @abstractmethod
    def attach_session(self, name: str) -> None:
        """Hand the terminal over to session ``name``."""
        ...


# tmux backend
class TmuxMultiplexer(Multiplexer):
    def __init__(self, binary: str = "tmux"):
        self.binary = binary

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.binary, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise MultiplexerError(f"'{self.binary}' not found. Is tmux installed?") from e
        except OSError as e:
            raise MultiplexerError(f"Failed to run {self.binary}: {e}") from e

    def list_sessions(self) -> List[str]:
        result = self._run("list-sessions", "-F", "#{session_name}")
        if result.returncode != 0:
            stderr = result.stderr.strip()
            if any(marker in stderr.lower() for marker in _NO_SERVER_MARKERS):
                return []
            raise MultiplexerError(f"tmux list-sessions failed: {stderr or result.returncode}")
        return [line for line in result.stdout.splitlines() if line]

    def create_session(self, name: str, path: str) -> None:
        result = self._run("new-session", "-d", "-s", name, "-c", path)
        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise MultiplexerError(f"tmux new-session failed: {stderr or result.returncode}")

    def attach_session(self, name: str) -> None:
        # attach-session refuses to nest, switch the client instead
        verb = "switch-client" if os.environ.get("TMUX") else "attach-session"
        # '=' makes tmux match the name exactly instead of by prefix
        argv = [self.binary, verb, "-t", f"={name}"]
        logger.debug("Exec %s", " ".join(argv))
        try:
            os.execvp(self.binary, argv)
        except OSError as e:
            raise MultiplexerError(f"Failed to attach to '{name}': {e}") from e
