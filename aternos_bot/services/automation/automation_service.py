"""
Automation service coordinator

Entry point for callers (CLI, chat bots). Every start request gets its own
browser session and sequencer, which are cleaned up when the request ends.
"""

import logging
from typing import Callable, Optional

from .browser_session import BrowserSession
from .progress import ProgressSink
from .sequencer import ServerStartSequencer
from .session_registry import SessionRegistry
from ...config import BotConfig
from ...exceptions import SessionBusyError
from ...models.start_result import StartResult

SessionFactory = Callable[[BotConfig], BrowserSession]


class AutomationService:
    """
    Automation service coordinator

    Handles per-request session lifecycle and keeps two requests from
    driving the same account at once.
    """

    def __init__(self, config: BotConfig, registry: Optional[SessionRegistry] = None,
                 session_factory: SessionFactory = BrowserSession):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config = config
        self.registry = registry or SessionRegistry()
        self._session_factory = session_factory

        self.on_log_message: Optional[Callable[[str], None]] = None
        self.last_sequencer: Optional[ServerStartSequencer] = None

    def set_callbacks(self, on_log_message: Callable[[str], None] = None):
        """Set callback functions for UI updates"""
        self.on_log_message = on_log_message

    def _log_message(self, message: str):
        """Internal logging and callback"""
        self.logger.info(message)
        if self.on_log_message:
            self.on_log_message(message)

    def is_busy(self) -> bool:
        return self.registry.is_active(self.config.username)

    async def start_server(self, progress_sink: Optional[ProgressSink] = None) -> StartResult:
        """Run one full start sequence in a fresh browser session; never raises"""
        try:
            async with self.registry.claim(self.config.username):
                session = self._session_factory(self.config)
                sequencer = ServerStartSequencer(self.config, session)
                self.last_sequencer = sequencer

                self._log_message(f"Starting server '{self.config.server_name}'")
                try:
                    result = await sequencer.run(progress_sink)
                finally:
                    await session.cleanup()

        except SessionBusyError as e:
            self.logger.warning(str(e))
            return StartResult.failed(e.message)
        except Exception as e:
            self.logger.error(f"Server start error: {e}", exc_info=True)
            return StartResult.failed(f"Server start error: {e}")

        if result.success:
            if result.already_running:
                self._log_message("Server already running")
            else:
                self._log_message("Server start sequence completed")
        else:
            self._log_message(f"Server start failed: {result.error}")
        return result
