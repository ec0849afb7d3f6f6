"""
Server start sequence using the transitions framework

Drives one browser session through entry navigation, login, the server list,
server lookup and the start button (including the ad gate that sometimes
follows it). Stages run strictly in order; the state machine records which
stage is active so failures can be reported with their context.
"""

import asyncio
import logging
from typing import Optional

from transitions.extensions.asyncio import AsyncMachine

from .base_driver import PageDriver
from .browser_session import BrowserSession
from .diagnostics import ScreenshotRecorder
from .progress import ProgressReporter, ProgressSink
from .result_detector import PageStateDetector
from .selectors import (
    AD_GATE_STRATEGY, FINAL_START_STRATEGY, LOGIN_SUBMIT_STRATEGIES, PageSelectors,
    START_BUTTON_STRATEGIES, first_match, pick_password_field, pick_username_field,
    server_lookup_strategies, visible_clickables_sample
)
from ...config import BotConfig
from ...exceptions import (
    AutomationError, BrowserInitializationError, ElementNotFoundError, LoginFailedError,
    PageNavigationError, ServerNotFoundError, StartButtonNotFoundError
)
from ...models.start_result import ProgressStage, StartResult


class ServerStartSequencer:
    """
    Start sequence for one Aternos server

    Stages can be called one by one; run() chains them and turns every
    failure into a StartResult.
    """

    states = [
        'idle',
        'preparing',
        'navigating',
        'authenticating',
        'opening_server_list',
        'starting_server',
        'completed',
        'failed'
    ]

    def __init__(self, config: BotConfig, session: BrowserSession,
                 progress_sink: Optional[ProgressSink] = None,
                 recorder: Optional[ScreenshotRecorder] = None):
        self.config = config
        self.session = session
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.progress = ProgressReporter(progress_sink)
        self.recorder = recorder or ScreenshotRecorder(
            config.debug_dir,
            clip={"x": 0, "y": 0, **config.browser.viewport},
            enabled=config.screenshots_enabled,
        )

        self.logged_in = False
        self.methods_used: dict[str, str] = {}

        self.machine = AsyncMachine(
            model=self,
            states=ServerStartSequencer.states,
            initial='idle',
            auto_transitions=False,
            send_event=True,
            after_state_change='_log_stage'
        )
        self._setup_transitions()

    def _setup_transitions(self):
        transitions = [
            ['prepare', 'idle', 'preparing'],
            ['navigate', 'preparing', 'navigating'],
            ['authenticate', 'navigating', 'authenticating'],
            ['open_server_list', ['navigating', 'authenticating'], 'opening_server_list'],
            ['start_server', ['navigating', 'authenticating', 'opening_server_list'], 'starting_server'],
            ['complete', 'starting_server', 'completed'],
            ['fail', '*', 'failed'],
            ['reset', '*', 'idle'],
        ]
        self.machine.add_transitions(transitions)

    async def _log_stage(self, event):
        self.logger.debug(f"Stage: {event.transition.source} -> {self.state}")

    async def on_enter_failed(self, event):
        self.logger.debug(f"Sequence failed after stage '{event.transition.source}'")

    @property
    def driver(self) -> PageDriver:
        if self.session.driver is None:
            raise BrowserInitializationError("No page available - create_page() has not succeeded")
        return self.session.driver

    async def _screenshot(self, name: str):
        await self.recorder.capture(self.session.driver, name)

    async def _sleep(self, milliseconds: int):
        if milliseconds > 0:
            await asyncio.sleep(milliseconds / 1000)

    # =================== Navigation ===================

    async def navigate_to_entry(self) -> bool:
        """Open the fast-redirect entry route, falling back to the site root"""
        timings = self.config.timings
        try:
            self.logger.info("Navigating to Aternos...")

            self.logger.debug("Navigation Method 1: Direct to /go/")
            try:
                await self.driver.goto(self.config.url("/go/"), timings.entry_navigation)
                await self._screenshot("01-aternos-loaded")
                self.logger.info("✓ Navigation Method 1 worked: Direct /go/")
            except Exception as e:
                self.logger.debug(f"Direct /go/ navigation failed: {e}")
                await self._screenshot("01-aternos-go-failed")

                self.logger.debug("Navigation Method 2: Main page first")
                await self.driver.goto(self.config.url("/"), timings.entry_navigation)
                await self._screenshot("01-aternos-main-redirect")
                self.logger.info("✓ Navigation Method 2 worked: Main page")

        except Exception as e:
            self.logger.error(f"Failed to navigate to Aternos: {e}")
            await self._screenshot("01-ERROR-navigation-failed")
            return False

        await self._sleep(timings.entry_settle)
        try:
            await self.driver.inject_ad_bait()
        except Exception as e:
            self.logger.warning(f"Could not inject ad container: {e}")
        return True

    async def navigate_to_server_list(self) -> bool:
        """Open the server list, falling back to the dashboard route"""
        timings = self.config.timings
        try:
            self.logger.debug("Servers Navigation Method 1: Direct /servers/")
            try:
                await self.driver.goto(self.config.url("/servers/"), timings.server_list_navigation)
                await self._screenshot("07-servers-page-loaded")
                self.logger.info("✓ Servers Navigation Method 1 worked: Direct /servers/")
                return True
            except Exception as e:
                self.logger.debug(f"Direct /servers/ navigation failed: {e}")

                self.logger.debug("Servers Navigation Method 2: Dashboard route")
                await self.driver.goto(self.config.url("/server/"), timings.server_list_navigation)
                await self._screenshot("07-servers-page-dashboard")
                self.logger.info("✓ Servers Navigation Method 2 worked: Dashboard route")
                return True

        except Exception as e:
            self.logger.error(f"Failed to navigate to servers: {e}")
            await self._screenshot("07-ERROR-servers-navigation-failed")
            return False

    # =================== Login ===================

    async def login(self) -> bool:
        """
        Log in once per sequencer

        Raises:
            ElementNotFoundError: If no username or password field can be found
            LoginFailedError: If the page still looks logged out after submitting
        """
        if self.logged_in:
            self.logger.debug("Already logged in, skipping login")
            return True

        timings = self.config.timings
        self.logger.info("Starting login process...")
        await self.progress.emit(ProgressStage.LOGIN)

        await self._sleep(timings.login_settle)
        await self._screenshot("02-login-page-loaded")

        await self._enter_credential("username", self.config.username)
        await self._screenshot("03-username-entered")

        await self._enter_credential("password", self.config.password)
        await self._screenshot("04-credentials-entered")

        await self._submit_login()
        await self._screenshot("05-login-submitted")

        if not await self.driver.wait_for_navigation(timings.login_navigation, wait_until="networkidle"):
            self.logger.debug("No navigation after submit, checking page in place")
        await self._sleep(timings.post_login_settle)

        self.logger.debug("Verifying login success...")
        url = self.driver.url
        method = PageStateDetector.detect_login_method(url, await self.driver.body_text())
        if method is None:
            await self._screenshot("06-ERROR-login-failed")
            raise LoginFailedError(url)

        if method == "url" and PageStateDetector.left_entry_only(url):
            self.logger.warning(f"Login accepted only because the page left the entry route: {url}")

        self.methods_used["login_check"] = method
        self.logged_in = True
        await self._screenshot("06-login-successful")
        self.logger.info("✓ Successfully logged into Aternos")
        return True

    async def _enter_credential(self, field: str, value: str):
        """Fill a credential field by script, falling back to typing"""
        label = field.capitalize()
        if field == "username":
            pick, type_selectors = pick_username_field, PageSelectors.USERNAME_TYPE_FIELDS
        else:
            pick, type_selectors = pick_password_field, PageSelectors.PASSWORD_TYPE_FIELDS

        self.logger.debug(f"{label} Method 1: Direct evaluation")
        snapshot = await self.driver.snapshot(PageSelectors.GROUPS)
        target = pick(snapshot)
        if target is not None:
            await self.driver.fill_by_script(target.ref, value)
            self.methods_used[field] = "script fill"
            self.logger.info(f"✓ {label} Method 1 worked: Direct evaluation")
            return

        self.logger.debug(f"{label} Method 2: Type method")
        selector = await self.driver.type_into_visible(type_selectors, value, self.config.timings.element)
        if selector is None:
            await self._screenshot(f"03-ERROR-{field}-field-not-found")
            raise ElementNotFoundError(f"{label} field", tried=["script fill", "keystroke typing"])

        self.methods_used[field] = "keystroke typing"
        self.logger.info(f"✓ {label} Method 2 worked: Type method ({selector})")

    async def _submit_login(self):
        snapshot = await self.driver.snapshot(PageSelectors.GROUPS)
        match = first_match(LOGIN_SUBMIT_STRATEGIES, snapshot)

        if match is None:
            self.logger.debug("Submit Method 3: Enter key press")
            await self.driver.press_enter()
            self.methods_used["login_submit"] = "enter key"
        elif match.element.tag == "form":
            await self.driver.submit_form(match.element.ref)
            self.methods_used["login_submit"] = match.method
        else:
            await self.driver.click(match.element.ref)
            self.methods_used["login_submit"] = match.method

        self.logger.info(f"✓ Login submitted using: {self.methods_used['login_submit']}")

    # =================== Server lookup and start ===================

    async def find_and_start(self) -> StartResult:
        """Click the configured server, then its start button and any ad gate"""
        timings = self.config.timings
        try:
            self.logger.info(f"Looking for {self.config.server_name} server...")
            await self.progress.emit(ProgressStage.FINDING)
            await self._screenshot("08-before-server-search")

            await self._click_server()
            await self._screenshot("09-server-found-clicked")

            if not await self.driver.wait_for_navigation(timings.server_click_navigation):
                self.logger.debug("No navigation after server click")
            await self._sleep(timings.post_server_click_settle)

            self.logger.info("Looking for start button...")
            await self.progress.emit(ProgressStage.STARTING)

            snapshot = await self.driver.snapshot(PageSelectors.GROUPS)
            match = first_match(START_BUTTON_STRATEGIES, snapshot)
            if match is None:
                return await self._handle_missing_start_button(snapshot)

            await self.driver.click(match.element.ref)
            self.methods_used["start_button"] = match.method
            await self._screenshot("11-start-button-clicked")
            self.logger.info(f"✓ Start button clicked using: {match.method}")

            await self._handle_ad_gate()

            await self._sleep(timings.final_settle)
            await self._screenshot("16-server-start-completed")
            self.logger.info("🚀 Server start sequence completed successfully!")
            return StartResult.started()

        except AutomationError as e:
            self.logger.error(f"Failed to start server: {e}")
            return StartResult.failed(e.message)
        except Exception as e:
            self.logger.error(f"Failed to start server: {e}", exc_info=True)
            return StartResult.failed(f"Failed to start server: {e}")

    async def _click_server(self):
        strategies = server_lookup_strategies(self.config.server_name)
        snapshot = await self.driver.snapshot(PageSelectors.GROUPS)
        match = first_match(strategies, snapshot)

        if match is None:
            await self._screenshot("08-ERROR-server-not-found")
            raise ServerNotFoundError(self.config.server_name, [s.name for s in strategies])

        await self.driver.click(match.element.ref)
        self.methods_used["server_lookup"] = match.method
        self.logger.info(f"✓ Server found using: {match.method}")

    async def _handle_missing_start_button(self, snapshot) -> StartResult:
        if PageStateDetector.is_server_running(snapshot.text):
            self.logger.info("Server appears to already be running")
            return StartResult.running()

        sample = visible_clickables_sample(snapshot)
        self.logger.error(f"Available buttons on page: {sample}")
        await self._screenshot("10-ERROR-no-start-button-found")
        raise StartButtonNotFoundError([s.name for s in START_BUTTON_STRATEGIES], sample)

    async def _handle_ad_gate(self):
        """Click through the second start button and the one after the ad, if present"""
        timings = self.config.timings
        self.logger.info("Checking for second start button (ad flow)...")
        await self._sleep(timings.ad_gate_wait)
        await self._screenshot("12-after-first-start-click")

        gate = AD_GATE_STRATEGY.pick(await self.driver.snapshot(PageSelectors.GROUPS))
        if gate is None:
            self.logger.info("No second start button found - proceeding with current flow")
            return

        await self.driver.click(gate.ref)
        self.methods_used["ad_gate"] = AD_GATE_STRATEGY.name
        self.logger.info(f"✓ Clicked second start button (ad): {gate.text[:50]}")
        await self._screenshot("13-second-start-button-clicked")

        self.logger.info("Waiting for ad/video to complete...")
        await self._sleep(timings.ad_completion_wait)
        await self._screenshot("14-after-ad-wait")

        final = FINAL_START_STRATEGY.pick(await self.driver.snapshot(PageSelectors.GROUPS))
        if final is None:
            self.logger.debug("No final start button after the ad")
            return

        await self.driver.click(final.ref)
        self.methods_used["final_start"] = FINAL_START_STRATEGY.name
        self.logger.info(f"✓ Clicked final start button: {final.text[:30]}")
        await self._screenshot("15-final-start-button-clicked")

    # =================== Orchestration ===================

    async def run(self, progress_sink: Optional[ProgressSink] = None) -> StartResult:
        """Run every stage in order; never raises"""
        if progress_sink is not None:
            self.progress = ProgressReporter(progress_sink)

        await self.reset()
        try:
            await self.prepare()
            if self.session.driver is None and not await self.session.create_page():
                raise BrowserInitializationError("Failed to create browser page")

            await self.navigate()
            if not await self.navigate_to_entry():
                raise PageNavigationError(
                    self.config.url("/go/"), attempts=2, message="Failed to navigate to Aternos"
                )

            if not self.logged_in:
                await self.authenticate()
                await self.login()

            if not PageStateDetector.is_server_list(self.driver.url):
                await self.open_server_list()
                if not await self.navigate_to_server_list():
                    raise PageNavigationError(
                        self.config.url("/servers/"), attempts=2, message="Failed to navigate to servers page"
                    )

            await self.start_server()
            result = await self.find_and_start()

        except AutomationError as e:
            self.logger.error(f"Error during server startup ({self.state}): {e}")
            await self.fail()
            return StartResult.failed(e.message)
        except Exception as e:
            stage = self.state.replace('_', ' ')
            self.logger.error(f"Unexpected error during server startup ({stage}): {e}", exc_info=True)
            await self.fail()
            return StartResult.failed(f"Unexpected error while {stage}: {e}")

        if result.success:
            await self.complete()
        else:
            await self.fail()
        return result
