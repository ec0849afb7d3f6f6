"""
Configuration for the server start bot

Values come from the environment (optionally a .env file). Browser options
default to a low-memory Chromium profile so the bot runs on small boards.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

BASE_URL = "https://aternos.org"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

CHROMIUM_CANDIDATES = [
    "/usr/bin/chromium-browser",
    "/usr/bin/chromium",
    "/usr/bin/google-chrome",
    "/opt/google/chrome/google-chrome",
]

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor,AudioContext",
    "--disable-extensions",
    "--disable-default-apps",
    "--disable-sync",
    "--disable-translate",
    "--disable-plugins",
    "--disable-plugins-discovery",
    "--disable-preconnect",
    "--disable-gpu-sandbox",
    "--disable-software-rasterizer",
    "--memory-pressure-off",
    "--disable-background-networking",
    "--disable-background-timer-throttling",
    "--disable-renderer-backgrounding",
    "--disable-backgrounding-occluded-windows",
    "--disable-features=TranslateUI",
    "--disable-ipc-flooding-protection",
    "--disable-blink-features=AutomationControlled",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def find_chromium(candidates: Optional[list[str]] = None) -> Optional[str]:
    """Return the first existing Chromium executable, or None for Playwright's bundled build"""
    for path in candidates if candidates is not None else CHROMIUM_CANDIDATES:
        if os.path.exists(path):
            return path
    return None


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class Timings:
    """Timeouts and settle delays, all in milliseconds"""
    entry_navigation: int = 8000
    server_list_navigation: int = 8000
    login_navigation: int = 15000
    server_click_navigation: int = 5000
    element: int = 3000

    entry_settle: int = 300
    login_settle: int = 300
    post_login_settle: int = 1000
    post_server_click_settle: int = 500
    ad_gate_wait: int = 1500
    ad_completion_wait: int = 2500
    final_settle: int = 1000

    @classmethod
    def instant(cls) -> "Timings":
        """Timings with every settle delay removed (timeouts unchanged)"""
        return cls(
            entry_settle=0,
            login_settle=0,
            post_login_settle=0,
            post_server_click_settle=0,
            ad_gate_wait=0,
            ad_completion_wait=0,
            final_settle=0,
        )


@dataclass
class BrowserOptions:
    """Chromium launch parameters"""
    headless: bool = True
    executable_path: Optional[str] = None
    args: list[str] = field(default_factory=lambda: list(BROWSER_ARGS))
    viewport_width: int = 800
    viewport_height: int = 600
    launch_timeout: int = 15000
    user_agent: str = USER_AGENT

    @property
    def viewport(self) -> dict:
        return {"width": self.viewport_width, "height": self.viewport_height}


@dataclass
class BotConfig:
    """Everything the start sequence needs to know"""
    username: str = ""
    password: str = ""
    server_name: str = "default"
    base_url: str = BASE_URL
    browser: BrowserOptions = field(default_factory=BrowserOptions)
    timings: Timings = field(default_factory=Timings)
    debug_dir: Path = Path("./debug")
    screenshots_enabled: bool = True

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "BotConfig":
        """Build configuration from environment variables, loading a .env file first"""
        load_dotenv(env_file)

        browser = BrowserOptions(
            headless=_env_flag("HEADLESS", True),
            executable_path=os.getenv("CHROMIUM_PATH") or find_chromium(),
        )
        return cls(
            username=os.getenv("ATERNOS_USERNAME", ""),
            password=os.getenv("ATERNOS_PASSWORD", ""),
            server_name=os.getenv("SERVER_NAME") or "default",
            browser=browser,
            debug_dir=Path(os.getenv("DEBUG_DIR") or "./debug"),
            screenshots_enabled=_env_flag("DEBUG_SCREENSHOTS", True),
        )

    def validate(self):
        """Check that credentials and the server name are present"""
        missing = []
        if not self.username:
            missing.append("ATERNOS_USERNAME")
        if not self.password:
            missing.append("ATERNOS_PASSWORD")
        if not self.server_name:
            missing.append("SERVER_NAME")
        if missing:
            raise ConfigurationError(missing)

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"
