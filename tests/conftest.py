"""
Shared test configuration and fixtures
"""

import pytest

from aternos_bot.config import BotConfig, Timings
from aternos_bot.services.automation.browser_session import BrowserSession
from fakes import FakePageDriver, build_site


@pytest.fixture
def config(tmp_path) -> BotConfig:
    return BotConfig(
        username="steve",
        password="diamond-pickaxe",
        server_name="survival",
        timings=Timings.instant(),
        debug_dir=tmp_path / "debug",
    )


@pytest.fixture
def site() -> FakePageDriver:
    return build_site()


@pytest.fixture
def session(config, site) -> BrowserSession:
    """Session whose page is already open on the fake site"""
    session = BrowserSession(config)
    session.driver = site
    return session
