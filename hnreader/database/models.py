"""Data models for locally persisted CLI state."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def get_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now().astimezone().isoformat()


@dataclass
class Auth:
    """Login token of the signed-in user."""

    username: str
    token: str
    expires: Optional[datetime] = None

    @property
    def is_expired(self) -> bool:
        if self.expires is None:
            return False
        return self.expires <= datetime.now(self.expires.tzinfo)

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "id": 1,
            "username": self.username,
            "token": self.token,
            "expires": self.expires.isoformat() if self.expires else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Auth":
        expires = data.get("expires")
        return cls(
            username=data["username"],
            token=data["token"],
            expires=datetime.fromisoformat(expires) if expires else None,
        )
