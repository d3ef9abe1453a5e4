from __future__ import annotations

import itertools
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, List, Optional, Tuple


class KeyRouter:
    """
    One <Key> binding on the root window, shared by every overlay layer.

    Layers add a listener for their lifetime and remove it on close. Only the
    most recently added listener sees key events, so Escape closes the topmost layer.
    """

    def __init__(self, root: tk.Misc):
        self._listeners: List[Tuple[int, Callable[[Any], Optional[str]]]] = []
        self._ids = itertools.count(1)
        root.bind("<Key>", self._dispatch, add="+")

    def add(self, callback: Callable[[Any], Optional[str]]) -> int:
        token = next(self._ids)
        self._listeners.append((token, callback))
        return token

    def remove(self, token: Optional[int]) -> None:
        self._listeners = [(t, cb) for t, cb in self._listeners if t != token]

    def _dispatch(self, event) -> Optional[str]:
        if not self._listeners:
            return None
        _, callback = self._listeners[-1]
        return callback(event)


class OverlayLayer(tk.Frame):
    """A frame laid over the whole root window; ``show()``/``hide()`` place and unplace it."""

    def __init__(self, root: tk.Misc, *, backdrop: str = "#1b1b1b"):
        super().__init__(root, bg=backdrop)
        self.body = ttk.Frame(self, padding=12)
        self.body.place(relx=0.5, rely=0.5, anchor="center")

    @property
    def visible(self) -> bool:
        return bool(self.winfo_manager())

    def show(self) -> None:
        self.place(relx=0, rely=0, relwidth=1, relheight=1)
        self.lift()

    def hide(self) -> None:
        self.place_forget()
