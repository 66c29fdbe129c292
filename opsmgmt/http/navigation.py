"""Where the client sends the user when authentication is lost."""

from __future__ import annotations

from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class Navigator:
    """Records route changes requested by the client.

    Hosts embed the client and pass ``on_navigate`` to react (open a login
    page, prompt for credentials, exit a CLI). Without a callback the
    request is only logged and remembered in ``last_route``.
    """

    def __init__(self, on_navigate: Callable[[str], None] | None = None) -> None:
        self._on_navigate = on_navigate
        self.history: list[str] = []

    @property
    def last_route(self) -> str | None:
        return self.history[-1] if self.history else None

    def navigate(self, route: str) -> None:
        self.history.append(route)
        logger.info("navigate", route=route)
        if self._on_navigate is not None:
            self._on_navigate(route)
