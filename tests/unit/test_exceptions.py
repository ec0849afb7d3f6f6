"""
Unit tests for the automation exception hierarchy
"""

import pytest

from aternos_bot.exceptions import (
    AutomationError, BrowserInitializationError, ConfigurationError, ElementNotFoundError,
    FormInteractionError, LoginFailedError, PageNavigationError, ServerNotFoundError,
    SessionBusyError, StartButtonNotFoundError
)


class TestCustomExceptions:
    """Test custom exception classes"""

    def test_automation_error_basic(self):
        """Test basic AutomationError functionality"""
        error = AutomationError("Test error", "TEST_CODE", {"key": "value"})

        assert str(error) == "Test error (Code: TEST_CODE, Details: {'key': 'value'})"
        assert error.message == "Test error"
        assert error.error_code == "TEST_CODE"
        assert error.details == {"key": "value"}

    def test_automation_error_defaults(self):
        """Test AutomationError with default values"""
        error = AutomationError("Test error")

        assert str(error) == "Test error (Code: AUTOMATION_ERROR)"
        assert error.error_code == "AUTOMATION_ERROR"
        assert error.details == {}

    def test_configuration_error_lists_missing_variables(self):
        error = ConfigurationError(["ATERNOS_USERNAME", "ATERNOS_PASSWORD"])

        assert error.message == "Missing required configuration: ATERNOS_USERNAME, ATERNOS_PASSWORD"
        assert error.error_code == "CONFIG_ERROR"
        assert error.missing == ["ATERNOS_USERNAME", "ATERNOS_PASSWORD"]

    def test_browser_initialization_error(self):
        """Test BrowserInitializationError"""
        error = BrowserInitializationError("Browser failed", "playwright", {"step": "launch"})

        assert error.backend == "playwright"
        assert error.error_code == "BROWSER_INIT_ERROR"
        assert "Browser failed" in str(error)

    def test_page_navigation_error(self):
        """Test PageNavigationError"""
        error = PageNavigationError("https://aternos.org/go/", 2, "Timeout 8000ms exceeded")

        assert error.url == "https://aternos.org/go/"
        assert error.attempts == 2
        assert error.message == "Failed to navigate to https://aternos.org/go/ after 2 attempts"
        assert error.details["last_error"] == "Timeout 8000ms exceeded"

    def test_page_navigation_error_single_attempt(self):
        error = PageNavigationError("https://aternos.org/servers/")

        assert error.message == "Failed to navigate to https://aternos.org/servers/"

    def test_page_navigation_error_custom_message(self):
        error = PageNavigationError("https://aternos.org/go/", 2, message="Failed to navigate to Aternos")

        assert error.message == "Failed to navigate to Aternos"
        assert error.attempts == 2

    def test_element_not_found_error(self):
        """Test ElementNotFoundError"""
        error = ElementNotFoundError("Username field", tried=["script fill", "keystroke typing"])

        assert error.element_type == "Username field"
        assert error.message == "Username field not found with any method"
        assert error.details["tried"] == ["script fill", "keystroke typing"]
        assert error.error_code == "ELEMENT_NOT_FOUND"

    def test_server_not_found_error(self):
        error = ServerNotFoundError("survival", ["server link", "server card", "clickable element"])

        assert isinstance(error, ElementNotFoundError)
        assert error.message == 'Could not find "survival" server'
        assert error.error_code == "SERVER_NOT_FOUND"
        assert error.server_name == "survival"

    def test_start_button_not_found_error_keeps_sample(self):
        sample = [{"text": "Settings", "className": "", "tagName": "A"}]
        error = StartButtonNotFoundError(["start button", "green button"], sample)

        assert error.message == "Could not find start button - check debug screenshot"
        assert error.sample == sample
        assert error.details["sample"] == sample

    def test_form_interaction_error(self):
        """Test FormInteractionError"""
        error = FormInteractionError("click", "element 3", {"reason": "element detached"})

        assert error.action == "click"
        assert error.field == "element 3"
        assert error.details["reason"] == "element detached"
        assert error.message == "Failed to click on field: element 3"

    def test_login_failed_error_advises_cooldown(self):
        error = LoginFailedError("https://aternos.org/go/")

        assert error.error_code == "LOGIN_FAILED"
        assert "credentials" in error.message
        assert "CAPTCHA" in error.message
        assert "60 minutes" in error.message
        assert error.cooldown_minutes == 60
        assert error.details["url"] == "https://aternos.org/go/"

    def test_login_failed_error_custom_cooldown(self):
        error = LoginFailedError(cooldown_minutes=15)

        assert "15 minutes" in error.message
        assert "url" not in error.details

    def test_session_busy_error(self):
        error = SessionBusyError("steve")

        assert error.key == "steve"
        assert error.error_code == "SESSION_BUSY"
        assert "already running" in error.message

    @pytest.mark.parametrize("error", [
        ConfigurationError(["SERVER_NAME"]),
        BrowserInitializationError("x"),
        PageNavigationError("https://aternos.org"),
        ElementNotFoundError("button"),
        FormInteractionError("fill", "username"),
        LoginFailedError(),
        SessionBusyError("steve"),
    ])
    def test_all_errors_are_automation_errors(self, error):
        assert isinstance(error, AutomationError)
