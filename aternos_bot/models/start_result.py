"""
Outcome and progress models for the server start sequence
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProgressStage(str, Enum):
    """Coarse progress events reported to the caller"""
    LOGIN = "login"
    FINDING = "finding"
    STARTING = "starting"


@dataclass
class StartResult:
    """Result of one start sequence"""
    success: bool
    already_running: bool = False
    error: Optional[str] = None

    def __post_init__(self):
        """Post initialization validation"""
        if not self.success and not self.error:
            self.error = "Unknown error occurred"

    @classmethod
    def started(cls) -> "StartResult":
        return cls(success=True, already_running=False)

    @classmethod
    def running(cls) -> "StartResult":
        return cls(success=True, already_running=True)

    @classmethod
    def failed(cls, error: str) -> "StartResult":
        return cls(success=False, error=error)

    def as_dict(self) -> dict:
        """Outcome record in the shape chat integrations expect"""
        result = {"success": self.success, "alreadyRunning": self.already_running}
        if self.error:
            result["error"] = self.error
        return result
