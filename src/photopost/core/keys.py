from __future__ import annotations

from typing import Any, Callable, Optional

ESCAPE_KEYS = ("Escape", "Esc")
ESCAPE_KEYCODE = 27

# tkinter stops further bindings for an event when a handler returns this.
BREAK = "break"


def is_escape(event: Any) -> bool:
    """
    True if the event is the Escape key.

    Key names win over the legacy numeric code: tk reports platform keycodes
    (27 is "r" on X11), so the code is only consulted when no name is given.
    """
    if event is None:
        return False
    key = getattr(event, "keysym", None) or getattr(event, "key", None)
    if key:
        return key in ESCAPE_KEYS
    return getattr(event, "keycode", None) == ESCAPE_KEYCODE


def handle_escape_press(event: Any, callback: Optional[Callable[[], Any]]) -> Optional[str]:
    """Call ``callback`` and suppress the event's default action if it is an Escape press."""
    if event is None or callback is None:
        return None
    if not is_escape(event):
        return None

    prevent = getattr(event, "prevent_default", None)
    if callable(prevent):
        prevent()
    callback()
    return BREAK
