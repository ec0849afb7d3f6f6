"""
Selectors and fallback strategies for the Aternos pages

Each lookup is an ordered list of strategies. A strategy is a pure function
from a PageSnapshot to the element it would act on (or None), so every
fallback chain can be checked against synthetic snapshots.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .page_state import ElementInfo, PageSnapshot, is_green

logger = logging.getLogger(__name__)


class PageSelectors:
    """CSS selector groups captured in every snapshot"""

    USERNAME_FIELDS = 'input[name="user"], input[name="username"], input[type="text"], input[type="email"]'
    PASSWORD_FIELDS = 'input[type="password"], input[name="password"]'
    LOGIN_BUTTONS = 'button, input[type="submit"], a, [role="button"]'
    FORMS = 'form'
    SERVER_LINKS = 'a[href*="server"], a[href*="go"]'
    SERVER_CARDS = '.server, [class*="server"], [data-server]'
    CLICKABLES = 'a, button, [onclick]'
    BUTTONS = 'button, a, [role="button"]'
    PLAIN_BUTTONS = 'button, a'

    GROUPS = {
        "username": USERNAME_FIELDS,
        "password": PASSWORD_FIELDS,
        "login_buttons": LOGIN_BUTTONS,
        "forms": FORMS,
        "server_links": SERVER_LINKS,
        "server_cards": SERVER_CARDS,
        "clickables": CLICKABLES,
        "buttons": BUTTONS,
        "plain_buttons": PLAIN_BUTTONS,
    }

    # Keystroke fallback, tried one by one while waiting for a visible field
    USERNAME_TYPE_FIELDS = ['input[name="user"]', 'input[name="username"]', 'input[type="text"]']
    PASSWORD_TYPE_FIELDS = ['input[type="password"]']


LOGIN_KEYWORDS = ("login", "sign in", "anmelden", "einloggen")
START_KEYWORDS = ("start", "play")
AD_GATE_KEYWORDS = ("start", "play", "watch", "continue")
FINAL_START_KEYWORDS = ("start", "play", "launch")
SUCCESS_CLASS_MARKERS = ("green", "success")


@dataclass(frozen=True)
class Strategy:
    """One fallback tier"""
    name: str
    pick: Callable[[PageSnapshot], Optional[ElementInfo]]


@dataclass(frozen=True)
class Match:
    """The tier that produced a target, and the target itself"""
    strategy: Strategy
    element: ElementInfo

    @property
    def method(self) -> str:
        return self.strategy.name


def first_match(strategies: Iterable[Strategy], snapshot: PageSnapshot) -> Optional[Match]:
    """Try strategies in order and stop at the first one that picks an element"""
    for strategy in strategies:
        logger.debug(f"Trying {strategy.name}")
        element = strategy.pick(snapshot)
        if element is not None:
            return Match(strategy, element)
    return None


def _first(elements: Iterable[ElementInfo], predicate: Callable[[ElementInfo], bool]) -> Optional[ElementInfo]:
    return next((element for element in elements if predicate(element)), None)


def _mentions(label: str, keywords: Iterable[str]) -> bool:
    return any(keyword in label for keyword in keywords)


# Field entry

def pick_username_field(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(snapshot.group("username"), lambda e: e.visible)


def pick_password_field(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(snapshot.group("password"), lambda e: e.visible)


# Login submission

def pick_login_button(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(
        snapshot.group("login_buttons"),
        lambda e: e.visible and _mentions(e.label, LOGIN_KEYWORDS),
    )


def pick_password_form(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(snapshot.group("forms"), lambda e: e.has_password_field)


LOGIN_SUBMIT_STRATEGIES = [
    Strategy("login button click", pick_login_button),
    Strategy("form submission", pick_password_form),
]


# Server lookup

def _server_text_in(group: str, server_name: str) -> Callable[[PageSnapshot], Optional[ElementInfo]]:
    needle = server_name.lower()

    def pick(snapshot: PageSnapshot) -> Optional[ElementInfo]:
        return _first(snapshot.group(group), lambda e: bool(e.text) and needle in e.text.lower())

    return pick


def server_lookup_strategies(server_name: str) -> list[Strategy]:
    """Tiers for finding the configured server, most specific first"""
    return [
        Strategy("server link", _server_text_in("server_links", server_name)),
        Strategy("server card", _server_text_in("server_cards", server_name)),
        Strategy("clickable element", _server_text_in("clickables", server_name)),
    ]


# Start button

def pick_start_button(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(
        snapshot.group("buttons"),
        lambda e: e.shown and _mentions(e.text.lower(), START_KEYWORDS),
    )


def _looks_successful(element: ElementInfo) -> bool:
    class_name = element.class_name.lower()
    return (
        is_green(element.background_color)
        or is_green(element.color)
        or _mentions(class_name, SUCCESS_CLASS_MARKERS)
    )


def pick_green_button(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(
        snapshot.group("plain_buttons"),
        lambda e: e.display != "none" and _looks_successful(e),
    )


START_BUTTON_STRATEGIES = [
    Strategy("start button", pick_start_button),
    Strategy("green button", pick_green_button),
]


# Ad gate

def pick_ad_gate_button(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(
        snapshot.group("buttons"),
        lambda e: e.shown and _mentions(e.text.lower(), AD_GATE_KEYWORDS),
    )


def pick_final_start_button(snapshot: PageSnapshot) -> Optional[ElementInfo]:
    return _first(
        snapshot.group("buttons"),
        lambda e: e.display != "none" and e.visible and _mentions(e.text.lower(), FINAL_START_KEYWORDS),
    )


AD_GATE_STRATEGY = Strategy("ad gate button", pick_ad_gate_button)
FINAL_START_STRATEGY = Strategy("final start button", pick_final_start_button)


def visible_clickables_sample(snapshot: PageSnapshot, limit: int = 10) -> list[dict]:
    """Short description of the first visible buttons, for failure logs"""
    sample = []
    for element in snapshot.group("buttons"):
        if len(sample) >= limit:
            break
        if element.visible:
            sample.append(element.describe())
    return sample
