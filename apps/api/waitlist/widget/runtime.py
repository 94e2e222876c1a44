"""Embeddable waitlist widget runtime.

A headless, asyncio-driven counterpart of the browser embed: it mounts a form
into a host ``Document``, loads the public form descriptor, and submits
signups over ``httpx``. Every widget is an independent ``WaitlistWidget``
instance; ``init`` is the factory.

Lifecycle::

    uninitialized -> loading -> ready -> submitting -> succeeded
                        |                    |
                        v                    v
                      failed               ready (error banner shown)

Load failures are terminal for the cycle; ``reset()`` starts a new one. A
generation counter, bumped by ``reset()``, makes results of older loads and
submits no-ops when they finally arrive. Nothing raised by the network or by
host callbacks escapes to the host.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Coroutine, Mapping
from urllib.parse import urlsplit

import httpx

from waitlist.widget import render
from waitlist.widget.dom import Document, Element, Event
from waitlist.widget.events import EventEmitter, invoke_safely
from waitlist.widget.theme import Theme

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
DEFAULT_ERROR_BANNER_SECONDS = 5.0


class WidgetState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class WidgetConfig:
    form_id: int | str
    selector: str
    theme: Theme = field(default_factory=Theme)
    on_success: Callable[[Any], Any] | None = None
    on_error: Callable[[Any], Any] | None = None
    # Defaults to the host page origin
    base_url: str | None = None
    error_banner_seconds: float = DEFAULT_ERROR_BANNER_SECONDS


def _page_origin(url: str) -> str:
    parts = urlsplit(url or "")
    if parts.scheme in ("http", "https") and parts.netloc:
        return f"{parts.scheme}://{parts.netloc}"
    return ""


def _numeric_form_id(form_id: int | str) -> int | str:
    if isinstance(form_id, str) and form_id.strip().isdigit():
        return int(form_id)
    return form_id


class WaitlistWidget:
    """One mounted waitlist form."""

    version = VERSION

    def __init__(
        self,
        document: Document,
        config: WidgetConfig,
        client: httpx.AsyncClient | None = None,
    ):
        self.document = document
        self.config = config
        self.state = WidgetState.UNINITIALIZED
        self.element: Element | None = None
        self.form_element: Element | None = None
        self.descriptor: dict[str, Any] | None = None
        self.last_error: BaseException | None = None

        self._client = client
        self._owns_client = client is None
        self._events = EventEmitter()
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._timers: set[asyncio.TimerHandle] = set()

    @property
    def is_initialized(self) -> bool:
        return self.element is not None

    @property
    def generation(self) -> int:
        return self._generation

    # -- public API --------------------------------------------------------

    def on(self, event: str, callback: Callable[[Any], Any]) -> None:
        """Register a ``submit``, ``success`` or ``error`` listener."""
        self._events.on(event, callback)

    def reset(self) -> None:
        """Discard whatever is in flight and load the form again."""
        if not self.is_initialized:
            logger.error("Widget is not initialized; call init() first")
            return
        self._generation += 1
        self._cancel_timers()
        self._start_load()

    def open(self) -> None:
        logger.warning("Modal display is not supported; the widget renders inline")

    def close(self) -> None:
        logger.warning("Modal display is not supported; the widget renders inline")

    def submit(self, data: Mapping[str, Any] | None = None) -> None:
        logger.warning("Programmatic submission is not supported; submit the rendered form")

    async def wait_idle(self) -> None:
        """Wait until no load or submit is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        self._cancel_timers()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # -- mounting ----------------------------------------------------------

    def mount(self) -> bool:
        """Resolve the container element. Logs and returns False on failure."""
        if not self.config.form_id or not self.config.selector:
            logger.error("Missing required parameters: form_id and selector are required")
            return False
        try:
            element = self.document.query_selector(self.config.selector)
        except ValueError:
            logger.error("Unsupported selector %r", self.config.selector)
            return False
        if element is None:
            logger.error("Element not found with selector %r", self.config.selector)
            return False
        self.element = element
        return True

    def start(self) -> None:
        self._start_load()

    # -- internals ---------------------------------------------------------

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            base_url = self.config.base_url or _page_origin(self.document.url)
            self._client = httpx.AsyncClient(base_url=base_url)
        return self._client

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_timers(self) -> None:
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug("Discarding result from generation %s (now %s)", generation, self._generation)
            return True
        return False

    def _start_load(self) -> None:
        self.state = WidgetState.LOADING
        self._spawn(self._load(self._generation))

    async def _load(self, generation: int) -> None:
        try:
            response = await self._get_client().get(f"/api/sdk/form/{self.config.form_id}")
            response.raise_for_status()
            descriptor = response.json()
            if not isinstance(descriptor, dict):
                raise ValueError(f"Form descriptor must be an object, got {type(descriptor).__name__}")
        except (httpx.HTTPError, ValueError) as exc:
            if self._is_stale(generation):
                return
            logger.error("Error loading form %s: %s", self.config.form_id, exc)
            self.state = WidgetState.FAILED
            self._report_error(exc)
            return

        if self._is_stale(generation):
            return
        self.descriptor = descriptor
        self.form_element = render.mount_form(
            self.document, self.element, self.config.form_id, descriptor, self.config.theme
        )
        self.form_element.add_event_listener("submit", self._handle_submit)
        self.state = WidgetState.READY

    def _handle_submit(self, event: Event) -> None:
        # Runs synchronously up to the network call so a second submit sees
        # the disabled button and the SUBMITTING state
        event.prevent_default()
        if self.state is not WidgetState.READY or self.form_element is None:
            return

        form = self.form_element
        email_input = form.query_selector('input[name="email"]')
        name_input = form.query_selector('input[name="name"]')
        if email_input is None or not email_input.value:
            return

        payload: dict[str, Any] = {"email": email_input.value, "referrer": self.document.url}
        if name_input is not None and name_input.value:
            payload["name"] = name_input.value

        self._events.emit("submit", payload)
        self.state = WidgetState.SUBMITTING
        button = form.query_selector('button[type="submit"]')
        if button is not None:
            button.disabled = True
            button.text_content = render.SUBMITTING_LABEL
        self._spawn(self._submit(self._generation, payload))

    async def _submit(self, generation: int, payload: dict[str, Any]) -> None:
        body = {"formId": _numeric_form_id(self.config.form_id), **payload}
        try:
            response = await self._get_client().post("/api/subscribers", json=body)
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            if self._is_stale(generation):
                return
            logger.error("Error submitting form %s: %s", self.config.form_id, exc)
            self._report_error(exc)
            self._show_error_banner()
            self._restore_button()
            self.state = WidgetState.READY
            return

        if self._is_stale(generation):
            return
        self._events.emit("success", result)
        invoke_safely(self.config.on_success, result, label="on_success callback")
        self._show_success()
        self.state = WidgetState.SUCCEEDED

    def _report_error(self, exc: BaseException) -> None:
        self.last_error = exc
        self._events.emit("error", exc)
        invoke_safely(self.config.on_error, exc, label="on_error callback")

    def _show_success(self) -> None:
        form = self.form_element
        if form is None:
            return
        form.clear()
        form.append_child(render.build_success_message(self.document))

    def _show_error_banner(self) -> None:
        form = self.form_element
        if form is None:
            return
        banner = form.prepend(render.build_error_banner(self.document))

        def expire() -> None:
            banner.remove()
            self._timers.discard(handle)

        handle = asyncio.get_running_loop().call_later(self.config.error_banner_seconds, expire)
        self._timers.add(handle)

    def _restore_button(self) -> None:
        if self.form_element is None:
            return
        button = self.form_element.query_selector('button[type="submit"]')
        if button is not None:
            button.disabled = False
            button.text_content = render.button_label(self.config.theme)


def init(
    document: Document,
    form_id: int | str | None = None,
    selector: str | None = None,
    theme: Theme | Mapping[str, Any] | None = None,
    on_success: Callable[[Any], Any] | None = None,
    on_error: Callable[[Any], Any] | None = None,
    client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
    error_banner_seconds: float = DEFAULT_ERROR_BANNER_SECONDS,
) -> WaitlistWidget:
    """
    Create a widget, mount it at ``selector`` and start loading the form.

    Must be called from a running event loop. Never raises for bad input:
    on a missing ``form_id``/``selector`` or an unmatched selector the error
    is logged and the returned widget stays ``uninitialized``.
    """
    if not isinstance(theme, Theme):
        theme = Theme.from_mapping(theme)
    config = WidgetConfig(
        form_id=form_id or "",
        selector=selector or "",
        theme=theme,
        on_success=on_success,
        on_error=on_error,
        base_url=base_url,
        error_banner_seconds=error_banner_seconds,
    )
    widget = WaitlistWidget(document, config, client=client)
    if widget.mount():
        widget.start()
    return widget
