"""
Unit tests for login and server state detection
"""

import pytest

from aternos_bot.services.automation.result_detector import PageStateDetector


class TestLoginDetection:
    """Login verification after submit"""

    @pytest.mark.parametrize("url", [
        "https://aternos.org/servers/",
        "https://aternos.org/home/",
    ])
    def test_post_login_routes(self, url):
        assert PageStateDetector.detect_login_method(url, "Username Password") == "url"

    def test_left_entry_route(self):
        assert PageStateDetector.detect_login_method("https://aternos.org/account/", "password") == "url"

    @pytest.mark.parametrize("text", ["Your Servers", "Dashboard", "Welcome back"])
    def test_content_check_on_entry_route(self, text):
        assert PageStateDetector.detect_login_method("https://aternos.org/go/", text) == "content"

    def test_still_on_login_form(self):
        assert PageStateDetector.detect_login_method(
            "https://aternos.org/go/", "Login Username Password Forgot password?"
        ) is None

    def test_empty_inputs_count_as_left_entry(self):
        """No URL means the entry route is gone"""
        assert PageStateDetector.detect_login_method("", "") == "url"

    def test_left_entry_only(self):
        assert PageStateDetector.left_entry_only("https://aternos.org/account/")
        assert not PageStateDetector.left_entry_only("https://aternos.org/servers/")
        assert not PageStateDetector.left_entry_only("https://aternos.org/go/")


class TestServerState:
    """Server list and running detection"""

    def test_is_server_list(self):
        assert PageStateDetector.is_server_list("https://aternos.org/servers/")
        assert not PageStateDetector.is_server_list("https://aternos.org/server/")
        assert not PageStateDetector.is_server_list(None)

    @pytest.mark.parametrize("text, expected", [
        ("Survival Online Players 0/20", True),
        ("Server is RUNNING", True),
        ("Survival Offline", False),
        ("Waiting in queue", False),
        ("", False),
    ])
    def test_is_server_running(self, text, expected):
        assert PageStateDetector.is_server_running(text) is expected
