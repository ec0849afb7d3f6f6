"""
Unit tests for the browser session lifecycle
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from aternos_bot.config import BotConfig
from aternos_bot.services.automation.browser_session import BrowserSession
from aternos_bot.services.automation.base_driver import PageDriver
from aternos_bot.services.automation.playwright_driver import PlaywrightPageDriver, STEALTH_SCRIPT


class TestBrowserSession:
    """Test browser launch, page creation and cleanup"""

    def setup_method(self):
        """Setup test instance before each test"""
        self.config = BotConfig(username="steve", password="secret", server_name="survival")
        self.config.browser.executable_path = "/usr/bin/chromium-browser"
        self.session = BrowserSession(self.config)

    def _mock_playwright(self):
        mock_playwright = AsyncMock()
        mock_browser = AsyncMock()
        mock_page = AsyncMock()
        mock_page.on = MagicMock()
        mock_playwright.chromium.launch = AsyncMock(return_value=mock_browser)
        mock_browser.new_page = AsyncMock(return_value=mock_page)
        return mock_playwright, mock_browser, mock_page

    @pytest.mark.asyncio
    async def test_browser_initialization_success(self):
        """Test successful browser launch with the low-memory profile"""
        mock_playwright, mock_browser, _ = self._mock_playwright()

        with patch('aternos_bot.services.automation.browser_session.async_playwright') as mock_factory:
            mock_factory.return_value.start = AsyncMock(return_value=mock_playwright)

            result = await self.session.ensure_browser()

        assert result is True
        assert self.session.playwright == mock_playwright
        assert self.session.browser == mock_browser

        call_kwargs = mock_playwright.chromium.launch.call_args[1]
        assert call_kwargs['headless'] is True
        assert call_kwargs['executable_path'] == "/usr/bin/chromium-browser"
        assert call_kwargs['timeout'] == 15000
        assert '--no-sandbox' in call_kwargs['args']
        assert '--disable-blink-features=AutomationControlled' in call_kwargs['args']

    @pytest.mark.asyncio
    async def test_browser_launched_once(self):
        mock_playwright, _, _ = self._mock_playwright()

        with patch('aternos_bot.services.automation.browser_session.async_playwright') as mock_factory:
            mock_factory.return_value.start = AsyncMock(return_value=mock_playwright)

            await self.session.ensure_browser()
            await self.session.ensure_browser()

        mock_playwright.chromium.launch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_browser_initialization_failure(self, caplog):
        """Launch failures are reported through the return value"""
        with patch('aternos_bot.services.automation.browser_session.async_playwright') as mock_factory:
            mock_factory.return_value.start = AsyncMock(side_effect=Exception("Executable doesn't exist"))

            with caplog.at_level(logging.ERROR):
                result = await self.session.ensure_browser()

        assert result is False
        assert self.session.browser is None
        assert "Failed to initialize browser" in caplog.text

    @pytest.mark.asyncio
    async def test_create_page(self):
        """Page gets the desktop user agent, small viewport and stealth script"""
        mock_playwright, mock_browser, mock_page = self._mock_playwright()

        with patch('aternos_bot.services.automation.browser_session.async_playwright') as mock_factory:
            mock_factory.return_value.start = AsyncMock(return_value=mock_playwright)

            result = await self.session.create_page()

        assert result is True
        mock_browser.new_page.assert_awaited_once_with(
            user_agent=self.config.browser.user_agent,
            viewport={"width": 800, "height": 600},
        )
        mock_page.add_init_script.assert_awaited_once_with(STEALTH_SCRIPT)
        assert isinstance(self.session.driver, PlaywrightPageDriver)
        assert self.session.driver.page is mock_page

    @pytest.mark.asyncio
    async def test_create_page_without_browser(self):
        self.session.ensure_browser = AsyncMock(return_value=False)

        assert await self.session.create_page() is False
        assert self.session.driver is None

    @pytest.mark.asyncio
    async def test_create_page_failure(self):
        _, mock_browser, _ = self._mock_playwright()
        mock_browser.new_page = AsyncMock(side_effect=Exception("Target closed"))
        self.session.browser = mock_browser

        assert await self.session.create_page() is False

    @pytest.mark.asyncio
    async def test_browser_cleanup_success(self):
        """Page, browser and Playwright are closed in that order"""
        order = []
        mock_page = AsyncMock()
        mock_browser = AsyncMock()
        mock_playwright = AsyncMock()
        mock_page.on = MagicMock()
        mock_page.close = AsyncMock(side_effect=lambda: order.append("page"))
        mock_browser.close = AsyncMock(side_effect=lambda: order.append("browser"))
        mock_playwright.stop = AsyncMock(side_effect=lambda: order.append("playwright"))

        self.session.page = mock_page
        self.session.driver = PlaywrightPageDriver(mock_page)
        self.session.browser = mock_browser
        self.session.playwright = mock_playwright

        await self.session.cleanup()

        assert order == ["page", "browser", "playwright"]
        assert self.session.page is None
        assert self.session.driver is None
        assert self.session.browser is None
        assert self.session.playwright is None
        assert self.session.closed

    def test_page_is_closed_only_by_the_session(self):
        assert not hasattr(PageDriver, "close")
        assert not hasattr(PlaywrightPageDriver, "close")

    @pytest.mark.asyncio
    async def test_browser_cleanup_with_errors(self, caplog):
        """Every close is attempted even when an earlier one fails"""
        mock_page = AsyncMock()
        mock_page.close.side_effect = Exception("Page already closed")
        mock_browser = AsyncMock()
        mock_playwright = AsyncMock()

        self.session.page = mock_page
        self.session.browser = mock_browser
        self.session.playwright = mock_playwright

        with caplog.at_level(logging.INFO):
            await self.session.cleanup()

        mock_browser.close.assert_awaited_once()
        mock_playwright.stop.assert_awaited_once()
        assert "Error closing page" in caplog.text
        assert "Browser cleanup completed" in caplog.text

    @pytest.mark.asyncio
    async def test_cleanup_is_idempotent(self, caplog):
        mock_browser = AsyncMock()
        self.session.browser = mock_browser

        with caplog.at_level(logging.INFO):
            await self.session.cleanup()
            await self.session.cleanup()

        mock_browser.close.assert_awaited_once()
        assert caplog.text.count("Browser cleanup completed") == 1

    @pytest.mark.asyncio
    async def test_cleanup_before_creation(self):
        await self.session.cleanup()

        assert self.session.closed

    @pytest.mark.asyncio
    async def test_closed_session_is_not_reused(self):
        await self.session.cleanup()

        with patch('aternos_bot.services.automation.browser_session.async_playwright') as mock_factory:
            assert await self.session.ensure_browser() is False
            assert await self.session.create_page() is False

        mock_factory.assert_not_called()
