"""
Locators and the Locator Resolver.

A Locator is a (kind, value) pair such as ``Locator.of("id", "login")`` or
``Locator(LocatorKind.XPATH, "//input[@id='login']")``. The resolver turns it
into a query for the browser session and looks it up in the live document.

Resolution never raises for a missing element: it returns ``NotFound``, which
is the normal answer while a page is still rendering.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .drivers.base import BrowserSession, ElementHandle
from .errors import InvalidLocatorKind


class LocatorKind(Enum):
    """Supported ways of locating an element."""

    XPATH = "xpath"
    ID = "id"
    NAME = "name"
    CLASS_NAME = "classname"
    PARTIAL_LINK_TEXT = "partiallinktext"
    LINK_TEXT = "linktext"
    TAG_NAME = "tagname"

    @classmethod
    def parse(cls, text) -> "LocatorKind":
        """
        Parse a kind from user input.

        Separators and case are ignored, so "class-name", "class_name",
        "Class Name" and "classname" are all CLASS_NAME.
        """
        if isinstance(text, cls):
            return text
        normalized = "".join(ch for ch in str(text).lower() if ch not in " -_")
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidLocatorKind(text) from None


@dataclass(frozen=True)
class Locator:
    """Identifies zero or more nodes in the current document."""

    kind: LocatorKind
    value: str

    def __post_init__(self):
        if not isinstance(self.kind, LocatorKind):
            object.__setattr__(self, "kind", LocatorKind.parse(self.kind))

    @classmethod
    def of(cls, kind, value: str) -> "Locator":
        return cls(LocatorKind.parse(kind), value)

    def __str__(self) -> str:
        return f"{self.kind.value} {self.value}"


@dataclass(frozen=True)
class Found:
    """The locator matched; ``handle`` is only valid for the current check."""

    handle: ElementHandle


@dataclass(frozen=True)
class NotFound:
    """Nothing in the document matches the locator right now."""

    locator: Locator


Resolution = Union[Found, NotFound]


def _css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _xpath_string(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    # both quote styles present
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"


def _css_identifier(value: str) -> str:
    out = []
    for ch in value:
        if ch.isalnum() or ch in "-_" or ord(ch) > 127:
            out.append(ch)
        else:
            out.append("\\" + ch)
    result = "".join(out)
    if result[:1].isdigit():
        result = f"\\3{result[0]} {result[1:]}"
    return result


def selector_for(locator: Locator) -> str:
    """Translate a locator into a session query string."""
    kind = locator.kind
    value = locator.value

    if kind == LocatorKind.XPATH:
        return f"xpath={value}"
    if kind == LocatorKind.ID:
        return f"[id={_css_string(value)}]"
    if kind == LocatorKind.NAME:
        return f"[name={_css_string(value)}]"
    if kind == LocatorKind.CLASS_NAME:
        return f".{_css_identifier(value)}"
    if kind == LocatorKind.LINK_TEXT:
        return f"xpath=//a[normalize-space(.)={_xpath_string(value)}]"
    if kind == LocatorKind.PARTIAL_LINK_TEXT:
        return f"xpath=//a[contains(normalize-space(.), {_xpath_string(value)})]"
    if kind == LocatorKind.TAG_NAME:
        return value

    raise InvalidLocatorKind(kind)


class LocatorResolver:
    """
    Looks locators up in the document of one browser session.

    Holds no state besides the session; every call queries the live page.
    """

    def __init__(self, session: BrowserSession):
        self.session = session

    def resolve(self, locator: Locator) -> Resolution:
        """Find the first element matching the locator."""
        handle = self.session.find_element(selector_for(locator))
        if handle is None:
            return NotFound(locator)
        return Found(handle)

    def resolve_all(self, locator: Locator) -> List[ElementHandle]:
        """Find every element matching the locator (possibly none)."""
        return list(self.session.find_elements(selector_for(locator)))
