"""Widget markup.

Shared by the runtime (mounting into a host page) and by the owner-side
preview endpoint, so the preview is exactly what an embed renders. All text
from the form descriptor goes in as text content and is escaped on output.
"""

from __future__ import annotations

from typing import Any, Mapping

from waitlist.widget.dom import Document, Element
from waitlist.widget.theme import BASE_STYLESHEET, BASE_STYLESHEET_ID, DEFAULT_BUTTON_TEXT, Theme

DEFAULT_TITLE = "Join Our Waitlist"
SUBMITTING_LABEL = "Joining..."
SUCCESS_LINES = ("Thank you for joining our waitlist!", "We'll keep you updated.")
ERROR_MESSAGE = "Something went wrong. Please try again later."
PREVIEW_CONTAINER_ID = "waitlist-container"


def button_label(theme: Theme) -> str:
    return theme.button_text or DEFAULT_BUTTON_TEXT


def ensure_base_styles(document: Document) -> Element:
    """Inject the base stylesheet into ``<head>`` unless it is already there."""
    existing = document.get_element_by_id(BASE_STYLESHEET_ID)
    if existing is not None:
        return existing
    style = document.create_element("style", {"id": BASE_STYLESHEET_ID}, BASE_STYLESHEET)
    return document.head.append_child(style)


def _field(
    document: Document,
    form_id: Any,
    name: str,
    label: str,
    input_type: str,
    placeholder: str,
    required: bool = False,
) -> Element:
    input_id = f"waitlist-{name}-{form_id}"
    wrapper = document.create_element("div", {"class": "waitlist-field"})
    wrapper.append_child(document.create_element("label", {"for": input_id}, label))
    attrs = {"type": input_type, "id": input_id, "name": name, "placeholder": placeholder}
    if required:
        attrs["required"] = ""
    wrapper.append_child(document.create_element("input", attrs))
    return wrapper


def build_form(
    document: Document,
    form_id: Any,
    descriptor: Mapping[str, Any],
    theme: Theme,
) -> Element:
    """Build the widget root for a public form descriptor (camelCase keys)."""
    root = document.create_element(
        "div",
        {"class": "waitlist-sdk-form", "style": theme.custom_properties()},
    )
    root.append_child(
        document.create_element("h3", {"class": "waitlist-title"}, descriptor.get("name") or DEFAULT_TITLE)
    )
    if descriptor.get("description"):
        root.append_child(
            document.create_element("p", {"class": "waitlist-description"}, descriptor["description"])
        )

    form = document.create_element(
        "form", {"id": f"waitlist-form-{form_id}", "class": "waitlist-form"}
    )
    # Email is always collected, whatever collectEmail says
    form.append_child(
        _field(document, form_id, "email", "Email", "email", "you@example.com", required=True)
    )
    if descriptor.get("collectName"):
        form.append_child(
            _field(document, form_id, "name", "Name (optional)", "text", "John Doe")
        )
    form.append_child(
        document.create_element(
            "button",
            {"type": "submit", "class": "waitlist-submit-button"},
            button_label(theme),
        )
    )
    root.append_child(form)
    return root


def mount_form(
    document: Document,
    container: Element,
    form_id: Any,
    descriptor: Mapping[str, Any],
    theme: Theme,
) -> Element:
    """Replace ``container``'s content with the widget. Returns the ``<form>``."""
    container.set_attribute("data-waitlist-form", "true")
    container.set_attribute("data-form-id", str(form_id))
    container.clear()
    root = container.append_child(build_form(document, form_id, descriptor, theme))
    ensure_base_styles(document)
    return root.query_selector("form")


def build_success_message(document: Document) -> Element:
    message = document.create_element("div", {"class": "waitlist-success"})
    for line in SUCCESS_LINES:
        message.append_child(document.create_element("p", text=line))
    return message


def build_error_banner(document: Document) -> Element:
    return document.create_element("div", {"class": "waitlist-error"}, ERROR_MESSAGE)


def render_preview_document(
    descriptor: Mapping[str, Any],
    theme: Theme | None = None,
) -> str:
    """Standalone HTML page showing the widget for ``descriptor``."""
    document = Document()
    document.head.append_child(document.create_element("meta", {"charset": "utf-8"}))
    document.head.append_child(
        document.create_element("title", text=f"Preview: {descriptor.get('name') or DEFAULT_TITLE}")
    )
    container = document.body.append_child(
        document.create_element("div", {"id": PREVIEW_CONTAINER_ID})
    )
    mount_form(document, container, descriptor["id"], descriptor, theme or Theme())
    return document.to_html()
