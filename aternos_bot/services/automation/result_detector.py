"""
Page state detection logic

Decides from URL and page text whether a login went through and whether the
server is already online.
"""

from typing import Optional


class PageStateDetector:
    """Detects login and server state from the current page"""

    # Routes only reachable once logged in
    POST_LOGIN_ROUTES = ["/servers", "/home"]

    # Fast-redirect route used before login
    ENTRY_ROUTE = "/go"

    DASHBOARD_WORDS = ["servers", "dashboard"]

    LOGIN_FORM_WORD = "password"

    RUNNING_WORDS = ["online", "running"]

    @staticmethod
    def detect_login_method(url: str, page_text: str) -> Optional[str]:
        """
        Verify a login after submission

        Args:
            url: URL of the page after submission
            page_text: Text content of the page body

        Returns:
            "url" or "content" naming the check that passed, None if both failed
        """
        url = (url or "").lower()
        if any(route in url for route in PageStateDetector.POST_LOGIN_ROUTES):
            return "url"
        if PageStateDetector.ENTRY_ROUTE not in url:
            return "url"

        text = (page_text or "").lower()
        if any(word in text for word in PageStateDetector.DASHBOARD_WORDS):
            return "content"
        if PageStateDetector.LOGIN_FORM_WORD not in text:
            return "content"

        return None

    @staticmethod
    def left_entry_only(url: str) -> bool:
        """True when the URL check passed only because the entry route is gone"""
        url = (url or "").lower()
        return (
            PageStateDetector.ENTRY_ROUTE not in url
            and not any(route in url for route in PageStateDetector.POST_LOGIN_ROUTES)
        )

    @staticmethod
    def is_server_list(url: str) -> bool:
        return "/servers" in (url or "").lower()

    @staticmethod
    def is_server_running(page_text: str) -> bool:
        text = (page_text or "").lower()
        return any(word in text for word in PageStateDetector.RUNNING_WORDS)
