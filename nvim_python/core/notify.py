"""User-facing warnings and errors, routed through the host's message surface."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nvim_python.core.fallbacks import log_best_effort_failure

if TYPE_CHECKING:
    from nvim_python.host import Host

logger = logging.getLogger(__name__)


class Notifier:
    """Write-only sink for messages the user should see. Never raises."""

    def __init__(self, host: Host):
        self._host = host

    def warn(self, message: str) -> None:
        logger.warning("%s", message)
        self._send(message, logging.WARNING)

    def error(self, message: str) -> None:
        logger.error("%s", message)
        self._send(message, logging.ERROR)

    def _send(self, message: str, level: int) -> None:
        try:
            self._host.notify(message, level)
        except Exception as exc:  # host message surface is outside our control
            log_best_effort_failure(logger, "notify the host", exc)


__all__ = ["Notifier"]
