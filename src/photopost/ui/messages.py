from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Dict, Optional, Tuple

from photopost.core.keys import handle_escape_press
from photopost.ui.layers import KeyRouter, OverlayLayer

# kind -> (default title, button text)
NOTICE_TEMPLATES: Dict[str, Tuple[str, str]] = {
    "success": ("Image uploaded successfully", "Great!"),
    "error": ("Could not upload the image", "Try again"),
}


class Notice(OverlayLayer):
    """Transient message. Closed by its button, Escape, or a click on the backdrop."""

    def __init__(self, root: tk.Misc, keys: KeyRouter, kind: str, title: str, button_text: str):
        super().__init__(root, backdrop="#3a3a3a")
        self.kind = kind
        self._keys = keys
        self._key_token: Optional[int] = None

        ttk.Label(self.body, text=title, font=("TkDefaultFont", 13, "bold")).pack(padx=16, pady=(8, 12))
        self.button = ttk.Button(self.body, text=button_text, command=self.dismiss)
        self.button.pack(pady=(0, 8))

        self.bind("<Button-1>", self._on_backdrop_click)

    def open(self) -> None:
        self.show()
        self._key_token = self._keys.add(lambda evt: handle_escape_press(evt, self.dismiss))

    def dismiss(self) -> None:
        if self._key_token is None:
            return
        self._keys.remove(self._key_token)
        self._key_token = None
        self.destroy()

    def _on_backdrop_click(self, event) -> None:
        # clicks inside the message box have a different event.widget
        if event.widget is self:
            self.dismiss()


class NoticeCenter:
    def __init__(self, root: tk.Misc, keys: KeyRouter):
        self.root = root
        self.keys = keys

    def show_message(self, kind: str, title: Optional[str] = None) -> Notice:
        default_title, button_text = NOTICE_TEMPLATES.get(kind, NOTICE_TEMPLATES["error"])
        notice = Notice(self.root, self.keys, kind, title or default_title, button_text)
        notice.open()
        return notice
