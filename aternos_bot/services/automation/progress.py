"""
Progress reporting to the caller

The sink is whatever the caller passed in: a plain function or a coroutine
function taking a ProgressStage. Sink failures are logged and ignored.
"""

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from ...models.start_result import ProgressStage

ProgressSink = Callable[[ProgressStage], Union[None, Awaitable[None]]]


class ProgressReporter:
    """Delivers progress events to an optional sink"""

    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
        self.history: list[ProgressStage] = []
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def emit(self, stage: ProgressStage):
        self.history.append(stage)
        if self.sink is None:
            return

        try:
            result = self.sink(stage)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self.logger.warning(f"Progress sink failed for '{stage.value}': {e}")
