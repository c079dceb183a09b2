from __future__ import annotations

import logging
from typing import Callable

from formify.config import THEMES

logger = logging.getLogger(__name__)

ThemeListener = Callable[[str], None]

CHART_STROKES = {"light": "#16a34a", "dark": "#4ADE80"}


class ThemeContext:
    """Process-wide light/dark theme, created once by ``create_app``."""

    def __init__(self, initial: str = "light") -> None:
        self._theme = initial if initial in THEMES else "light"
        self._listeners: list[ThemeListener] = []

    @property
    def theme(self) -> str:
        return self._theme

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def toggle(self) -> str:
        self._theme = "dark" if self._theme == "light" else "light"
        logger.info("Theme switched to %s", self._theme)
        for listener in list(self._listeners):
            listener(self._theme)
        return self._theme

    @property
    def chart_stroke(self) -> str:
        return CHART_STROKES[self._theme]
