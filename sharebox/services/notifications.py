# sharebox/services/notifications.py

"""Fire-and-forget user-facing notifications (the "toast" channel)."""

import logging
from collections.abc import Callable
from typing import Literal

from rich.console import Console

logger = logging.getLogger("sharebox.notifications")

Severity = Literal["success", "info", "error"]

# (message, severity) -> None; return values are ignored
Notifier = Callable[[str, Severity], None]

_STYLES: dict[str, str] = {
    "success": "green",
    "info": "cyan",
    "error": "bold red",
}


class ConsoleNotifier:
    """Prints notifications as styled lines on a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        # Stderr so stdout stays clean for JSON output
        self.console = console or Console(stderr=True)

    def __call__(self, message: str, severity: Severity) -> None:
        style = _STYLES.get(severity, "")
        self.console.print(message, style=style, markup=False)


def safe_notify(
    notifier: Notifier | None, message: str, severity: Severity
) -> None:
    """Invoke *notifier* if present, logging instead of raising on failure."""
    if notifier is None:
        return
    try:
        notifier(message, severity)
    except Exception:
        logger.warning(
            "Notifier failed for message %r", message, exc_info=True
        )
