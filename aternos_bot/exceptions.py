"""
Custom exceptions for server start automation error handling
"""

from typing import Optional


class AutomationError(Exception):
    """Base exception class for all automation-related errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "AUTOMATION_ERROR"
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} (Code: {self.error_code}, Details: {self.details})"
        return f"{self.message} (Code: {self.error_code})"


class ConfigurationError(AutomationError):
    """Exception raised when required configuration is missing"""

    def __init__(self, missing: list[str]):
        message = f"Missing required configuration: {', '.join(missing)}"
        super().__init__(message, "CONFIG_ERROR", {"missing": missing})
        self.missing = missing


class BrowserInitializationError(AutomationError):
    """Exception raised when browser or page creation fails"""

    def __init__(self, message: str, backend: str = "playwright", details: Optional[dict] = None):
        super().__init__(message, "BROWSER_INIT_ERROR", details)
        self.backend = backend


class PageNavigationError(AutomationError):
    """Exception raised when page navigation fails"""

    def __init__(self, url: str, attempts: int = 1, last_error: Optional[str] = None,
                 message: Optional[str] = None):
        if message is None:
            message = f"Failed to navigate to {url}"
            if attempts > 1:
                message += f" after {attempts} attempts"

        details = {
            "url": url,
            "attempts": attempts,
            "last_error": last_error
        }
        super().__init__(message, "NAVIGATION_ERROR", details)
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class ElementNotFoundError(AutomationError):
    """Exception raised when no fallback tier finds a required element"""

    def __init__(self, element_type: str, tried: Optional[list[str]] = None,
                 message: Optional[str] = None, error_code: str = "ELEMENT_NOT_FOUND"):
        tried = tried or []
        if message is None:
            message = f"{element_type} not found with any method"

        details = {"element_type": element_type}
        if tried:
            details["tried"] = tried
        super().__init__(message, error_code, details)
        self.element_type = element_type
        self.tried = tried


class ServerNotFoundError(ElementNotFoundError):
    """Exception raised when the configured server is not on the server list"""

    def __init__(self, server_name: str, tried: Optional[list[str]] = None):
        super().__init__(
            "server",
            tried,
            message=f'Could not find "{server_name}" server',
            error_code="SERVER_NOT_FOUND",
        )
        self.server_name = server_name


class StartButtonNotFoundError(ElementNotFoundError):
    """Exception raised when no start control exists and the server is not running"""

    def __init__(self, tried: Optional[list[str]] = None, sample: Optional[list[dict]] = None):
        super().__init__(
            "start button",
            tried,
            message="Could not find start button - check debug screenshot",
            error_code="START_BUTTON_NOT_FOUND",
        )
        self.sample = sample or []
        if self.sample:
            self.details["sample"] = self.sample


class FormInteractionError(AutomationError):
    """Exception raised when form interaction fails"""

    def __init__(self, action: str, field: str, details: Optional[dict] = None):
        message = f"Failed to {action} on field: {field}"
        error_details = {"action": action, "field": field}
        if details:
            error_details.update(details)

        super().__init__(message, "FORM_INTERACTION_ERROR", error_details)
        self.action = action
        self.field = field


class LoginFailedError(AutomationError):
    """
    Exception raised when login verification fails after submission.

    Either the credentials were rejected or a CAPTCHA intercepted the login.
    Retrying right away makes a CAPTCHA more likely, so callers should wait
    for the cooldown before the next attempt.
    """

    DEFAULT_COOLDOWN_MINUTES = 60

    def __init__(self, url: str = "", cooldown_minutes: int = DEFAULT_COOLDOWN_MINUTES):
        message = (
            "Login failed - credentials rejected or CAPTCHA intervention, "
            f"wait {cooldown_minutes} minutes before retrying (cooldown advised)"
        )
        details = {"cooldown_minutes": cooldown_minutes}
        if url:
            details["url"] = url
        super().__init__(message, "LOGIN_FAILED", details)
        self.url = url
        self.cooldown_minutes = cooldown_minutes


class SessionBusyError(AutomationError):
    """Exception raised when another start sequence already holds the account"""

    def __init__(self, key: str):
        message = f"A start sequence is already running for account '{key}'"
        super().__init__(message, "SESSION_BUSY", {"key": key})
        self.key = key
