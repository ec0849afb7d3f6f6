"""
Registry of running start sequences

Two sequences logging into the same account at once would race each other on
the same server page, so each account can be claimed by one sequence at a time.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ...exceptions import SessionBusyError


class SessionRegistry:
    """Tracks which accounts currently have a start sequence running"""

    def __init__(self):
        self._active: set[str] = set()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def key_for(username: str) -> str:
        return (username or "").strip().lower()

    def is_active(self, username: str) -> bool:
        return self.key_for(username) in self._active

    @asynccontextmanager
    async def claim(self, username: str) -> AsyncIterator[str]:
        """
        Hold the account for the duration of the block

        Raises:
            SessionBusyError: If another sequence already holds the account
        """
        key = self.key_for(username)
        if key in self._active:
            raise SessionBusyError(key)

        self._active.add(key)
        self.logger.debug(f"Claimed session for '{key}'")
        try:
            yield key
        finally:
            self._active.discard(key)
            self.logger.debug(f"Released session for '{key}'")
