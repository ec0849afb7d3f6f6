"""
Abstract base class for page drivers

Defines the page operations the start sequence relies on. The Playwright
driver implements them against a real page; tests substitute scripted pages.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .page_state import PageSnapshot


class PageDriver(ABC):
    """Abstract base class for page drivers"""

    @property
    @abstractmethod
    def url(self) -> str:
        """Current page URL"""
        pass

    @abstractmethod
    async def goto(self, url: str, timeout: int):
        """
        Navigate and wait for the initial document parse

        Raises:
            PageNavigationError: If the page does not load within timeout (ms)
        """
        pass

    @abstractmethod
    async def wait_for_navigation(self, timeout: int, wait_until: str = "domcontentloaded") -> bool:
        """Wait, at most timeout ms in total, for a navigation since the last action; False on timeout"""
        pass

    @abstractmethod
    async def snapshot(self, groups: dict[str, str]) -> PageSnapshot:
        """Capture URL, body text and every element matching the selector groups"""
        pass

    @abstractmethod
    async def click(self, ref: str):
        """Click an element from the latest snapshot"""
        pass

    @abstractmethod
    async def fill_by_script(self, ref: str, value: str):
        """Assign a field value and dispatch input/change events"""
        pass

    @abstractmethod
    async def type_into_visible(self, selectors: list[str], value: str, timeout: int) -> Optional[str]:
        """Type into the first visible field matching one of selectors; returns the selector used"""
        pass

    @abstractmethod
    async def submit_form(self, ref: str):
        """Submit a form from the latest snapshot"""
        pass

    @abstractmethod
    async def press_enter(self):
        pass

    @abstractmethod
    async def body_text(self) -> str:
        pass

    @abstractmethod
    async def inject_ad_bait(self):
        """Append a hidden ad container so ad-blocker checks find one"""
        pass

    @abstractmethod
    async def screenshot(self, path: Path, clip: Optional[dict] = None):
        pass
