"""Data models for bookmarks and session targets"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AliasEntry:
    """A directory bookmarked under a short alias"""
    alias: str
    path: str  # absolute, canonical
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert entry to dictionary for storage"""
        return {
            "alias": self.alias,
            "path": self.path,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AliasEntry":
        """Create entry from dictionary"""
        data = data.copy()
        if "created_at" in data and isinstance(data["created_at"], str):
            data["created_at"] = datetime.fromisoformat(data["created_at"])
        return cls(**data)

    def __str__(self) -> str:
        return f"{self.alias}\t{self.path}"


@dataclass(frozen=True)
class SessionTarget:
    """The tmux session a bookmark resolves to"""
    alias: str
    path: str
    session_name: str
