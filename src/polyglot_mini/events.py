"""Observer registry for language changes and restart requests."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from polyglot_mini.utils import logger

LanguageSubscriber = Callable[[str, Mapping[str, str]], None]
RestartHandler = Callable[[str], None]


class LanguageChangeBus:
    """Append-only subscriber lists dispatched synchronously in order."""

    def __init__(self) -> None:
        """Initialize empty subscriber lists."""
        self._subscribers: list[LanguageSubscriber] = []
        self._restart_handlers: list[RestartHandler] = []

    def subscribe(self, subscriber: LanguageSubscriber) -> LanguageSubscriber:
        """Register ``subscriber``; returns it so the method works as a decorator."""
        self._subscribers.append(subscriber)
        return subscriber

    def on_restart_required(self, handler: RestartHandler) -> RestartHandler:
        """Register ``handler`` for switches that ask the host to rebuild its UI."""
        self._restart_handlers.append(handler)
        return handler

    @property
    def subscriber_count(self) -> int:
        """Number of registered language subscribers."""
        return len(self._subscribers)

    def notify(self, language: str, table: Mapping[str, str]) -> None:
        """Call every subscriber with ``(language, table)``.

        A failing subscriber is logged and does not stop the others.
        """
        for subscriber in list(self._subscribers):
            try:
                subscriber(language, table)
            except Exception:
                logger.exception("language change subscriber %r failed", subscriber)

    def request_restart(self, language: str) -> bool:
        """Ask restart handlers to rebuild for ``language``.

        Returns ``False`` when no handler is registered.
        """
        if not self._restart_handlers:
            logger.warning(
                "restart requested for %s but no restart handler is registered",
                language,
            )
            return False
        for handler in list(self._restart_handlers):
            try:
                handler(language)
            except Exception:
                logger.exception("restart handler %r failed", handler)
        return True


__all__ = ["LanguageChangeBus", "LanguageSubscriber", "RestartHandler"]
