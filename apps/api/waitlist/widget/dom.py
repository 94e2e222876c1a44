"""Minimal in-memory DOM for the headless widget runtime.

Just enough of the browser document model to mount, query and update a
waitlist form: elements with attributes and children, text content, event
listeners, and serialization back to HTML. Host pages can be built by hand or
parsed from markup with ``Document.from_html``.

Selectors are compound only (``tag#id.class[attr="value"]``); combinators
such as descendant or child selectors raise ``ValueError``.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Callable, Iterator

VOID_ELEMENTS = frozenset({"area", "base", "br", "col", "hr", "img", "input", "link", "meta"})
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

_COMPOUND_RE = re.compile(r"^(?P<tag>[a-zA-Z][\w-]*|\*)?(?P<rest>.*)$")
_PART_RE = re.compile(
    r"#(?P<id>[\w-]+)"
    r"|\.(?P<cls>[\w-]+)"
    r"|\[(?P<attr>[\w-]+)(?:=(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[\w-]+)))?\]"
)


@dataclass
class Selector:
    tag: str | None = None
    ids: list[str] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)
    # (name, value); value None means "attribute present"
    attrs: list[tuple[str, str | None]] = field(default_factory=list)

    @classmethod
    def parse(cls, selector: str) -> "Selector":
        text = (selector or "").strip()
        match = _COMPOUND_RE.match(text)
        if not text or not match:
            raise ValueError(f"Unsupported selector: {selector!r}")

        tag = match.group("tag")
        parsed = cls(tag=None if tag in (None, "*") else tag.lower())
        rest = match.group("rest")
        position = 0
        while position < len(rest):
            part = _PART_RE.match(rest, position)
            if not part:
                raise ValueError(f"Unsupported selector: {selector!r}")
            if part.group("id"):
                parsed.ids.append(part.group("id"))
            elif part.group("cls"):
                parsed.classes.append(part.group("cls"))
            else:
                value = next(
                    (v for v in (part.group("dq"), part.group("sq"), part.group("bare")) if v is not None),
                    None,
                )
                parsed.attrs.append((part.group("attr").lower(), value))
            position = part.end()
        return parsed

    def matches(self, element: "Element") -> bool:
        if self.tag and element.tag != self.tag:
            return False
        if any(element.id != value for value in self.ids):
            return False
        classes = element.class_list
        if any(name not in classes for name in self.classes):
            return False
        for name, value in self.attrs:
            if name not in element.attrs:
                return False
            if value is not None and element.attrs[name] != value:
                return False
        return True


class Event:
    """A dispatched DOM event."""

    def __init__(self, type: str):
        self.type = type
        self.target: Element | None = None
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class Element:
    """A DOM element. Text is held as the element's own leading text node."""

    def __init__(self, tag: str, attrs: dict[str, str] | None = None, text: str = ""):
        self.tag = tag.lower()
        self.attrs: dict[str, str] = {k.lower(): v for k, v in (attrs or {}).items()}
        self.text = text
        self.children: list[Element] = []
        self.parent: Element | None = None
        self._listeners: dict[str, list[Callable[[Event], None]]] = {}

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attrs!r}>"

    # -- attributes --------------------------------------------------------

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name.lower(), default)

    def set_attribute(self, name: str, value: str) -> None:
        self.attrs[name.lower()] = str(value)

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attrs

    def remove_attribute(self, name: str) -> None:
        self.attrs.pop(name.lower(), None)

    @property
    def id(self) -> str | None:
        return self.attrs.get("id")

    @property
    def class_list(self) -> list[str]:
        return self.attrs.get("class", "").split()

    @property
    def value(self) -> str:
        return self.attrs.get("value", "")

    @value.setter
    def value(self, value: str) -> None:
        self.attrs["value"] = value

    @property
    def disabled(self) -> bool:
        return "disabled" in self.attrs

    @disabled.setter
    def disabled(self, value: bool) -> None:
        if value:
            self.attrs["disabled"] = ""
        else:
            self.attrs.pop("disabled", None)

    @property
    def text_content(self) -> str:
        return self.text + "".join(child.text_content for child in self.children)

    @text_content.setter
    def text_content(self, value: str) -> None:
        self.clear()
        self.text = value

    # -- tree --------------------------------------------------------------

    def append_child(self, child: "Element") -> "Element":
        child.remove()
        child.parent = self
        self.children.append(child)
        return child

    def prepend(self, child: "Element") -> "Element":
        child.remove()
        child.parent = self
        self.children.insert(0, child)
        return child

    def remove_child(self, child: "Element") -> "Element":
        self.children.remove(child)
        child.parent = None
        return child

    def remove(self) -> None:
        """Detach from the parent. No-op when already detached."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def clear(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []
        self.text = ""

    def iter_descendants(self) -> Iterator["Element"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def query_selector(self, selector: str) -> "Element | None":
        parsed = Selector.parse(selector)
        return next((el for el in self.iter_descendants() if parsed.matches(el)), None)

    def query_selector_all(self, selector: str) -> list["Element"]:
        parsed = Selector.parse(selector)
        return [el for el in self.iter_descendants() if parsed.matches(el)]

    def closest(self, selector: str) -> "Element | None":
        parsed = Selector.parse(selector)
        node: Element | None = self
        while node is not None:
            if parsed.matches(node):
                return node
            node = node.parent
        return None

    def contains(self, other: "Element") -> bool:
        node: Element | None = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    # -- events ------------------------------------------------------------

    def add_event_listener(self, event_type: str, listener: Callable[[Event], None]) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Callable[[Event], None]) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: Event) -> bool:
        """Run listeners in registration order. Returns False if default was prevented."""
        event.target = event.target or self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
        return not event.default_prevented

    def click(self) -> None:
        """Simulate a user click; a submit button submits its enclosing form."""
        if self.disabled:
            return
        self.dispatch_event(Event("click"))
        if self.tag == "button" and self.get_attribute("type", "submit") == "submit":
            form = self.closest("form")
            if form is not None:
                form.dispatch_event(Event("submit"))

    # -- serialization -----------------------------------------------------

    def to_html(self) -> str:
        parts = [f"<{self.tag}"]
        for name, value in self.attrs.items():
            if value == "":
                parts.append(f" {name}")
            else:
                parts.append(f' {name}="{html.escape(value, quote=True)}"')
        parts.append(">")
        if self.tag in VOID_ELEMENTS:
            return "".join(parts)
        if self.tag in RAW_TEXT_ELEMENTS:
            parts.append(self.text)
        else:
            parts.append(html.escape(self.text, quote=False))
        parts.extend(child.to_html() for child in self.children)
        parts.append(f"</{self.tag}>")
        return "".join(parts)


class Document:
    """A host page: ``<html>`` with ``<head>`` and ``<body>`` plus the page URL."""

    def __init__(self, url: str = "about:blank"):
        self.url = url
        self.document_element = Element("html")
        self.head = self.document_element.append_child(Element("head"))
        self.body = self.document_element.append_child(Element("body"))

    @classmethod
    def from_html(cls, markup: str, url: str = "about:blank") -> "Document":
        """Parse a page body. ``<head>`` content in ``markup`` is merged into ``head``."""
        document = cls(url=url)
        builder = _TreeBuilder(document)
        builder.feed(markup)
        builder.close()
        return document

    @property
    def location(self) -> str:
        return self.url

    def create_element(self, tag: str, attrs: dict[str, str] | None = None, text: str = "") -> Element:
        return Element(tag, attrs, text)

    def get_element_by_id(self, element_id: str) -> Element | None:
        return next(
            (el for el in self.document_element.iter_descendants() if el.id == element_id),
            None,
        )

    def query_selector(self, selector: str) -> Element | None:
        return self.document_element.query_selector(selector)

    def query_selector_all(self, selector: str) -> list[Element]:
        return self.document_element.query_selector_all(selector)

    def to_html(self) -> str:
        return "<!DOCTYPE html>" + self.document_element.to_html()


class _TreeBuilder(HTMLParser):
    def __init__(self, document: Document):
        super().__init__(convert_charrefs=True)
        self.document = document
        self._stack: list[Element] = [document.body]

    def handle_starttag(self, tag, attrs):
        tag = tag.lower()
        if tag in ("html", "body"):
            return
        if tag == "head":
            self._stack.append(self.document.head)
            return
        element = Element(tag, {k: (v or "") for k, v in attrs})
        self._stack[-1].append_child(element)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        tag = tag.lower()
        element = Element(tag, {k: (v or "") for k, v in attrs})
        self._stack[-1].append_child(element)

    def handle_endtag(self, tag):
        tag = tag.lower()
        if tag in ("html", "body") or tag in VOID_ELEMENTS:
            return
        # Pop back to the matching open element; stray end tags are ignored
        for index in range(len(self._stack) - 1, 0, -1):
            if self._stack[index].tag == tag:
                del self._stack[index:]
                return

    def handle_data(self, data):
        current = self._stack[-1]
        if current.children:
            # Text after a child element is dropped; the widget never reads it
            return
        current.text += data if current.tag in RAW_TEXT_ELEMENTS else data.strip()
