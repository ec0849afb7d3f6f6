"""
Debug screenshots

Every stage writes NN-description.png files so a failed run can be traced
after the fact. Capture is best-effort: failures are logged and never reach
the stage that asked for the screenshot.
"""

import logging
from pathlib import Path
from typing import Optional

from .base_driver import PageDriver


class ScreenshotRecorder:
    """Writes numbered screenshots into the debug directory"""

    def __init__(self, debug_dir: Path, clip: Optional[dict] = None, enabled: bool = True):
        self.debug_dir = Path(debug_dir)
        self.clip = clip
        self.enabled = enabled
        self.captured: list[str] = []
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def capture(self, driver: Optional[PageDriver], name: str) -> Optional[Path]:
        """Save a screenshot named after the stage; returns the path or None"""
        if not self.enabled or driver is None:
            return None

        path = self.debug_dir / f"{name}.png"
        try:
            self.debug_dir.mkdir(parents=True, exist_ok=True)
            await driver.screenshot(path, self.clip)
        except Exception as e:
            self.logger.error(f"Failed to take {name} screenshot: {e}")
            return None

        self.captured.append(name)
        self.logger.debug(f"Screenshot saved: {name}.png")
        return path
