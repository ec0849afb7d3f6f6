"""
Pure-data view of the page used by the fallback strategies

A snapshot is captured once per lookup by the page driver. Strategies only
ever look at snapshots, so they can be exercised without a browser.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

_RGB_PATTERN = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)")


@dataclass(frozen=True)
class ElementInfo:
    """One candidate element as seen by the page"""
    ref: str
    tag: str
    text: str = ""
    value: str = ""
    href: str = ""
    class_name: str = ""
    role: str = ""
    input_type: str = ""
    name: str = ""
    visible: bool = True
    display: str = "block"
    visibility: str = "visible"
    background_color: str = ""
    color: str = ""
    has_password_field: bool = False
    groups: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ElementInfo":
        return cls(
            ref=str(data.get("ref", "")),
            tag=(data.get("tag") or "").lower(),
            text=data.get("text") or "",
            value=data.get("value") or "",
            href=data.get("href") or "",
            class_name=data.get("className") or "",
            role=data.get("role") or "",
            input_type=(data.get("type") or "").lower(),
            name=data.get("name") or "",
            visible=bool(data.get("visible")),
            display=data.get("display") or "",
            visibility=data.get("visibility") or "",
            background_color=data.get("backgroundColor") or "",
            color=data.get("color") or "",
            has_password_field=bool(data.get("hasPassword")),
            groups=tuple(data.get("groups") or ()),
        )

    @property
    def label(self) -> str:
        """Lower-cased text a user would read on the element"""
        return (self.text or self.value).lower()

    @property
    def shown(self) -> bool:
        """Not hidden through CSS display or visibility"""
        return self.display != "none" and self.visibility != "hidden"

    def in_group(self, group: str) -> bool:
        return group in self.groups

    def describe(self) -> dict:
        return {
            "text": self.text[:30],
            "className": self.class_name[:30],
            "tagName": self.tag.upper(),
        }


def is_green(color: str) -> bool:
    """True for colour strings that read as green"""
    color = (color or "").lower()
    if "green" in color:
        return True
    match = _RGB_PATTERN.search(color)
    if not match:
        return False
    red, green, blue = (int(part) for part in match.groups())
    return green >= 100 and green > red + 40 and green > blue + 40


@dataclass
class PageSnapshot:
    """URL, body text and candidate elements in document order"""
    url: str = ""
    text: str = ""
    elements: list[ElementInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "PageSnapshot":
        return cls(
            url=data.get("url") or "",
            text=data.get("text") or "",
            elements=[ElementInfo.from_dict(item) for item in data.get("elements") or []],
        )

    def group(self, name: str) -> Iterator[ElementInfo]:
        """Elements matching a selector group, in document order"""
        return (element for element in self.elements if element.in_group(name))

    def find(self, ref: str) -> Optional[ElementInfo]:
        for element in self.elements:
            if element.ref == ref:
                return element
        return None
