"""Domain models for secret checks."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Status(str, Enum):
    """Coarse classification of a check outcome."""
    SUCCESS = "success"
    PARTIAL = "partial"
    NOT_FOUND = "not_found"
    ERROR = "error"


class StatusPolicy(str, Enum):
    """How a report's status is derived from its counts."""
    MULTI_KEY_GRADED = "multi_key_graded"
    SINGLE_KEY_BINARY = "single_key_binary"


class InvalidInputPolicy(str, Enum):
    """What to do when stdin does not hold a JSON object."""
    DEFAULT = "default"
    ERROR = "error"


@dataclass
class CheckInput:
    """Decoded input object. The message is accepted but does not affect the check."""
    message: str = ""


@dataclass
class SecretEntry:
    """Represents one queried environment variable."""
    key: str
    found: bool
    value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "found": self.found, "value": self.value}


@dataclass
class Report:
    """Result of one check run."""
    success: bool
    status: Status
    secrets: List[SecretEntry] = field(default_factory=list)
    found_count: int = 0
    total_count: int = 0
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-ready dict.

        Field order matches the output schema consumers expect.
        """
        return {
            "success": self.success,
            "status": self.status.value,
            "secrets": [entry.to_dict() for entry in self.secrets],
            "found_count": self.found_count,
            "total_count": self.total_count,
            "message": self.message,
        }
