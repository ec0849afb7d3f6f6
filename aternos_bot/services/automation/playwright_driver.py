"""
Playwright page driver

Snapshots tag each candidate element with a reference attribute so the
sequence can act on exactly the element a strategy picked. Clicks and fills
run as page scripts, which reach elements that overlays would block for a
real mouse click.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError, Error as PlaywrightError

from .base_driver import PageDriver
from .page_state import PageSnapshot
from ...exceptions import FormInteractionError, PageNavigationError

REF_ATTRIBUTE = "data-autostart-ref"

# Masks the automation flag and makes ad-blocker checks see ads as allowed
STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
window.adsbygoogle = window.adsbygoogle || [];
window.googletag = window.googletag || {};
window.googletag.cmd = window.googletag.cmd || [];
window.canRunAds = true;
window.adBlockEnabled = false;
"""

SNAPSHOT_SCRIPT = """
({ groups, marker }) => {
    document.querySelectorAll(`[${marker}]`).forEach((el) => el.removeAttribute(marker));
    const entries = Object.entries(groups);
    const union = entries.map(([, selector]) => selector).join(', ');
    const elements = [];
    let index = 0;
    for (const el of document.querySelectorAll(union)) {
        const ref = String(index++);
        el.setAttribute(marker, ref);
        const style = window.getComputedStyle(el);
        const isButtonInput = el.tagName === 'INPUT' && ['submit', 'button'].includes(el.type);
        elements.push({
            ref,
            tag: el.tagName,
            text: (el.textContent || '').replace(/\s+/g, ' ').trim(),
            value: isButtonInput ? (el.value || '') : '',
            href: el.getAttribute('href') || '',
            className: typeof el.className === 'string' ? el.className : (el.getAttribute('class') || ''),
            role: el.getAttribute('role') || '',
            type: el.getAttribute('type') || '',
            name: el.getAttribute('name') || '',
            visible: el.offsetParent !== null,
            display: style.display,
            visibility: style.visibility,
            backgroundColor: style.backgroundColor,
            color: style.color,
            hasPassword: el.tagName === 'FORM' && !!el.querySelector('input[type="password"]'),
            groups: entries.filter(([, selector]) => el.matches(selector)).map(([group]) => group),
        });
    }
    return {
        url: window.location.href,
        text: document.body ? (document.body.textContent || '') : '',
        elements,
    };
}
"""

CLICK_SCRIPT = """
([marker, ref]) => {
    const el = document.querySelector(`[${marker}="${ref}"]`);
    if (!el) return false;
    el.click();
    return true;
}
"""

FILL_SCRIPT = """
([marker, ref, value]) => {
    const el = document.querySelector(`[${marker}="${ref}"]`);
    if (!el) return false;
    el.value = value;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}
"""

SUBMIT_SCRIPT = """
([marker, ref]) => {
    const form = document.querySelector(`[${marker}="${ref}"]`);
    if (!form) return false;
    HTMLFormElement.prototype.submit.call(form);
    return true;
}
"""

AD_BAIT_SCRIPT = """
() => {
    const fakeAd = document.createElement('div');
    fakeAd.className = 'adsbygoogle';
    fakeAd.style.display = 'none';
    document.body.appendChild(fakeAd);
}
"""

BODY_TEXT_SCRIPT = "() => document.body ? (document.body.textContent || '') : ''"


class PlaywrightPageDriver(PageDriver):
    """Page driver backed by a Playwright page"""

    def __init__(self, page: Page):
        self.page = page
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._navigated = False
        page.on("framenavigated", self._on_frame_navigated)

    def _on_frame_navigated(self, frame):
        if frame == self.page.main_frame:
            self._navigated = True

    @property
    def url(self) -> str:
        return self.page.url

    async def goto(self, url: str, timeout: int):
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=timeout)
        except PlaywrightTimeoutError:
            raise PageNavigationError(url, 1, f"Timeout after {timeout}ms")
        except PlaywrightError as e:
            raise PageNavigationError(url, 1, str(e))

    async def wait_for_navigation(self, timeout: int, wait_until: str = "domcontentloaded") -> bool:
        """Wait for a main-frame navigation and its load state

        Both waits share one deadline. A navigation that already happened
        after the last click, submit or Enter counts without waiting again.
        """
        deadline = time.monotonic() + timeout / 1000
        try:
            if not self._navigated:
                await self.page.wait_for_event(
                    "framenavigated",
                    predicate=lambda frame: frame == self.page.main_frame,
                    timeout=timeout,
                )

            remaining = int((deadline - time.monotonic()) * 1000)
            if remaining <= 0:
                self.logger.debug("Navigated, no time left to wait for the load state")
                return True

            await self.page.wait_for_load_state(wait_until, timeout=remaining)
            return True
        except PlaywrightTimeoutError:
            self.logger.debug(f"No navigation within {timeout}ms")
            return False
        finally:
            self._navigated = False

    async def snapshot(self, groups: dict[str, str]) -> PageSnapshot:
        data = await self.page.evaluate(SNAPSHOT_SCRIPT, {"groups": groups, "marker": REF_ATTRIBUTE})
        return PageSnapshot.from_dict(data)

    async def click(self, ref: str):
        self._navigated = False
        if not await self.page.evaluate(CLICK_SCRIPT, [REF_ATTRIBUTE, ref]):
            raise FormInteractionError("click", f"element {ref}", {"reason": "element detached"})

    async def fill_by_script(self, ref: str, value: str):
        if not await self.page.evaluate(FILL_SCRIPT, [REF_ATTRIBUTE, ref, value]):
            raise FormInteractionError("fill", f"element {ref}", {"reason": "element detached"})

    async def type_into_visible(self, selectors: list[str], value: str, timeout: int) -> Optional[str]:
        for selector in selectors:
            try:
                await self.page.wait_for_selector(selector, timeout=timeout)
                elements = await self.page.locator(selector).all()

                for element in elements:
                    if await element.is_visible():
                        await element.press_sequentially(value, delay=50)
                        return selector

            except PlaywrightTimeoutError:
                continue
        return None

    async def submit_form(self, ref: str):
        self._navigated = False
        if not await self.page.evaluate(SUBMIT_SCRIPT, [REF_ATTRIBUTE, ref]):
            raise FormInteractionError("submit", f"form {ref}", {"reason": "form detached"})

    async def press_enter(self):
        self._navigated = False
        await self.page.keyboard.press("Enter")

    async def body_text(self) -> str:
        return await self.page.evaluate(BODY_TEXT_SCRIPT)

    async def inject_ad_bait(self):
        await self.page.evaluate(AD_BAIT_SCRIPT)

    async def screenshot(self, path: Path, clip: Optional[dict] = None):
        await self.page.screenshot(path=str(path), clip=clip)
