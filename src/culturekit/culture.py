"""Culture Service.

Holds the application's current culture, validates culture identifiers
against the configured supported set, and notifies subscribers whenever
the culture changes.

Subscribers are "hot": they receive only changes made after they
subscribe, never the value current at subscription time.

Usage:
    from culturekit.culture import CultureService, culture_context

    cultures = CultureService(["en-GB", "de"])
    cultures.current_culture                   # "en-GB"

    subscription = cultures.subscribe(lambda tag: print("now", tag))
    cultures.set_culture("de")                 # prints "now de"
    subscription.unsubscribe()

    with cultures.culture_changes() as changes:
        cultures.set_culture("en-GB")
        changes.get(timeout=1)                 # "en-GB"

    with culture_context(cultures, "de"):
        ...                                    # previous culture restored on exit
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Iterable, Iterator

from culturekit.errors import UnsupportedCultureError
from culturekit.protocols import canonical_tag


logger = logging.getLogger(__name__)

CultureCallback = Callable[[str], Any]


class Subscription:
    """Handle returned by :meth:`CultureService.subscribe`."""

    def __init__(self, service: "CultureService", callback: CultureCallback) -> None:
        self._service = service
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        if self.active:
            self.active = False
            self._service._remove(self)

    def _deliver(self, culture: str) -> None:
        if not self.active:
            return
        try:
            self.callback(culture)
        except Exception as e:
            logger.warning(f"Error invoking culture change callback {self.callback!r}: {e}")


_CLOSED = object()


class CultureStream:
    """Blocking iterator over culture changes.

    Each stream buffers the changes it has not consumed yet, so a slow
    consumer never misses one. The stream stays subscribed and keeps
    buffering until :meth:`close`, so callers must close it or use it as a
    context manager. Iteration ends after :meth:`close`.
    """

    def __init__(self, service: "CultureService") -> None:
        self._queue: queue.Queue[Any] = queue.Queue()
        self._closed = False
        self._subscription = service.subscribe(self._queue.put)

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, timeout: float | None = None) -> str:
        """Wait for the next culture change.

        Raises:
            TimeoutError: If no change arrives within ``timeout`` seconds
            StopIteration: If the stream was closed
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("No culture change received") from None
        if item is _CLOSED:
            # Keep the marker for other consumers of this stream
            self._queue.put(_CLOSED)
            raise StopIteration
        return item

    def poll(self) -> str | None:
        """Return the next buffered change without blocking, or None."""
        try:
            item = self._queue.get_nowait()
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._subscription.unsubscribe()
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return self.get()

    def __enter__(self) -> "CultureStream":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class CultureService:
    """Thread-safe holder of the current culture.

    Args:
        supported_cultures: Cultures the application accepts. The first
            entry is the default and initial culture.

    Raises:
        ValueError: If no supported culture is given
    """

    def __init__(self, supported_cultures: Iterable[str]) -> None:
        cultures: list[str] = []
        for culture in supported_cultures:
            tag = canonical_tag(culture)
            if tag not in cultures:
                cultures.append(tag)
        if not cultures:
            raise ValueError("At least one supported culture is required")

        self._supported = tuple(cultures)
        self._current = cultures[0]
        self._subscriptions: list[Subscription] = []
        self._lock = threading.RLock()

    @property
    def current_culture(self) -> str:
        with self._lock:
            return self._current

    @property
    def default_culture(self) -> str:
        return self._supported[0]

    @property
    def supported_cultures(self) -> tuple[str, ...]:
        return self._supported

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def is_supported(self, culture: str) -> bool:
        try:
            return canonical_tag(culture) in self._supported
        except (ValueError, AttributeError):
            return False

    def validate_culture(self, culture: str) -> str:
        """Return the canonical tag of a supported culture.

        Raises:
            UnsupportedCultureError: If the culture is not supported
        """
        try:
            tag = canonical_tag(culture)
        except (ValueError, AttributeError):
            raise UnsupportedCultureError(str(culture), self._supported) from None
        if tag not in self._supported:
            raise UnsupportedCultureError(culture, self._supported)
        return tag

    def set_culture(self, culture: str) -> None:
        """Switch the current culture and notify subscribers.

        Setting the culture that is already current still notifies.

        Raises:
            UnsupportedCultureError: If the culture is not supported; the
                current culture is left unchanged and nobody is notified
        """
        tag = self.validate_culture(culture)
        with self._lock:
            previous = self._current
            self._current = tag
            subscriptions = list(self._subscriptions)
            # Delivered under the lock so every subscriber sees changes in order
            for subscription in subscriptions:
                subscription._deliver(tag)
        logger.debug(f"Culture changed: {previous} -> {tag}")

    def subscribe(self, callback: CultureCallback) -> Subscription:
        """Register a callback invoked with each new culture tag."""
        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def culture_changes(self) -> CultureStream:
        """Open a stream of culture changes made from now on.

        The stream is subscribed immediately and buffers every change until
        it is closed. Close it, or use it in a ``with`` block:

            with cultures.culture_changes() as changes:
                ...
        """
        return CultureStream(self)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)


class culture_context:
    """Context manager for a temporary culture change.

    Example:
        with culture_context(cultures, "de"):
            globalization.format_number(1234.5)    # "1.234,5"
        # Previous culture restored
    """

    def __init__(self, service: CultureService, culture: str):
        self.service = service
        self.culture = culture
        self._previous: str | None = None

    def __enter__(self) -> "culture_context":
        self._previous = self.service.current_culture
        self.service.set_culture(self.culture)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._previous is not None:
            self.service.set_culture(self._previous)
