"""
Automation service module for starting an Aternos server

Drives a headless Chromium through the Aternos login and server pages. The
page markup is third-party and changes without notice, so every lookup is an
ordered list of fallback strategies evaluated against page snapshots.

Architecture Overview:
======================

    Caller (CLI / chat command)
                    │
                    ▼
    ┌───────────────────────────────────────────────────┐
    │            AutomationService                      │ ← Per-request coordinator
    │  (SessionRegistry + session lifecycle)            │
    └───────────────────┬───────────────────────────────┘
                        │
                        ▼
    ┌─────────────────────────────────────────────────┐
    │          ServerStartSequencer                   │ ← Stage machine
    │  entry → login → server list → server → start   │
    └─────────────────┬─────────────┬─────────────────┘
                      │             │
                      ▼             ▼
    ┌─────────────────────┐  ┌─────────────────────────┐
    │   BrowserSession    │  │  Strategies (selectors) │ ← Pure fallback tiers
    │ (browser + page)    │  │  PageStateDetector      │
    └─────────┬───────────┘  └─────────────────────────┘
              │
              ▼
    ┌─────────────────────────────────────────────────┐
    │     PageDriver / PlaywrightPageDriver           │ ← Snapshots and actions
    └─────────────────────────────────────────────────┘

    Supporting Components:
    ├── ScreenshotRecorder ← NN-description.png debug captures
    └── ProgressReporter   ← login / finding / starting events

Usage Patterns:
===============

service = AutomationService(BotConfig.from_env())
result = await service.start_server(progress_sink=print)
"""

from .automation_service import AutomationService
from .base_driver import PageDriver
from .browser_session import BrowserSession
from .diagnostics import ScreenshotRecorder
from .page_state import ElementInfo, PageSnapshot
from .playwright_driver import PlaywrightPageDriver
from .progress import ProgressReporter
from .result_detector import PageStateDetector
from .selectors import PageSelectors, Strategy, first_match
from .sequencer import ServerStartSequencer
from .session_registry import SessionRegistry

__all__ = [
    'AutomationService',
    'BrowserSession',
    'ElementInfo',
    'PageDriver',
    'PageSelectors',
    'PageSnapshot',
    'PageStateDetector',
    'PlaywrightPageDriver',
    'ProgressReporter',
    'ScreenshotRecorder',
    'ServerStartSequencer',
    'SessionRegistry',
    'Strategy',
    'first_match',
]
