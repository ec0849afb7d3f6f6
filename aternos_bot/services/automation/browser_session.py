"""
Browser session lifecycle

A session owns one Playwright driver, one browser and at most one page. It is
created on first use and destroyed by cleanup(); a cleaned-up session is
never reused.
"""

import logging
from typing import Optional

from playwright.async_api import async_playwright, Browser, Page, Playwright

from .base_driver import PageDriver
from .playwright_driver import PlaywrightPageDriver, STEALTH_SCRIPT
from ...config import BotConfig
from ...exceptions import BrowserInitializationError


class BrowserSession:
    """Owns the browser and page used by one start sequence"""

    def __init__(self, config: BotConfig):
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.page: Optional[Page] = None
        self.driver: Optional[PageDriver] = None
        self.closed = False

    async def ensure_browser(self) -> bool:
        """Launch the browser unless one is already running"""
        if self.closed:
            self.logger.error("Session was cleaned up; start a new session instead")
            return False
        if self.browser:
            return True

        options = self.config.browser
        try:
            self.logger.info("Initializing Playwright browser...")
            if not self.playwright:
                self.playwright = await async_playwright().start()

            self.browser = await self.playwright.chromium.launch(
                headless=options.headless,
                executable_path=options.executable_path,
                args=options.args,
                timeout=options.launch_timeout,
            )
            self.logger.info("Browser launched successfully")
            return True

        except Exception as e:
            error = BrowserInitializationError(
                f"Failed to initialize browser: {e}",
                details={"executable_path": options.executable_path},
            )
            self.logger.error(str(error))
            return False

    async def create_page(self) -> bool:
        """Open a page with a desktop user agent, small viewport and stealth script"""
        try:
            if not await self.ensure_browser():
                return False

            options = self.config.browser
            self.page = await self.browser.new_page(
                user_agent=options.user_agent,
                viewport=options.viewport,
            )
            await self.page.add_init_script(STEALTH_SCRIPT)
            self.driver = PlaywrightPageDriver(self.page)
            return True

        except Exception as e:
            self.logger.error(f"Failed to create page: {e}")
            return False

    async def cleanup(self):
        """Close page, browser and Playwright; never raises"""
        if self.closed:
            return
        self.closed = True

        if self.page:
            try:
                await self.page.close()
            except Exception as e:
                self.logger.error(f"Error closing page: {e}")
            self.page = None
            self.driver = None

        if self.browser:
            try:
                await self.browser.close()
            except Exception as e:
                self.logger.error(f"Error closing browser: {e}")
            self.browser = None

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                self.logger.error(f"Error stopping Playwright: {e}")
            self.playwright = None

        self.logger.info("Browser cleanup completed")
