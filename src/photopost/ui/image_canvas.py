from __future__ import annotations

import tkinter as tk
from typing import Optional, Tuple

from PIL import Image, ImageTk


def fit_box(img_size: Tuple[int, int], box_size: Tuple[int, int], zoom: float = 1.0) -> Tuple[int, int]:
    """Largest size that keeps the aspect ratio inside ``box_size``, then multiplied by ``zoom``."""
    img_w, img_h = img_size
    box_w, box_h = box_size
    if img_w <= 0 or img_h <= 0 or box_w <= 2 or box_h <= 2:
        return (1, 1)
    k = min(box_w / img_w, box_h / img_h) * zoom
    return max(1, int(img_w * k)), max(1, int(img_h * k))


class PhotoCanvas(tk.Canvas):
    """
    Canvas that shows one PIL image centered in its box.

    ``zoom`` shrinks the picture inside the box (the surrounding area stays
    background colored), and ``caption`` is drawn in the bottom-left corner.
    The resized bitmap is cached per image and target size, so window resizes
    and repeated renders of the same state do not resample again.
    """

    def __init__(self, master, *, placeholder: str = "", bg: str = "#f3f3f3", **kw):
        kw.setdefault("highlightthickness", 0)
        super().__init__(master, bg=bg, **kw)
        self._source: Optional[Image.Image] = None
        self._zoom = 1.0
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._cache_key = None

        self._placeholder = self.create_text(10, 10, anchor="nw", text=placeholder, fill="#555")
        self._caption = self.create_text(8, 0, anchor="sw", text="", fill="#777", font=("TkDefaultFont", 9))
        self.bind("<Configure>", lambda _e: self._draw())

    def show(self, image: Optional[Image.Image], zoom: float = 1.0, caption: str = "") -> None:
        self._source = image
        self._zoom = zoom
        self.itemconfigure(self._caption, text=caption)
        self._draw()

    def clear(self) -> None:
        self.show(None)

    def _draw(self) -> None:
        box = (max(1, self.winfo_width()), max(1, self.winfo_height()))
        self.coords(self._caption, 8, box[1] - 6)

        if self._source is None:
            self.delete("photo")
            self._tk_image = None
            self._cache_key = None
            self.itemconfigure(self._placeholder, state="normal")
            return
        self.itemconfigure(self._placeholder, state="hidden")

        size = fit_box(self._source.size, box, self._zoom)
        if self._cache_key is None or self._cache_key[0] is not self._source or self._cache_key[1] != size:
            self._tk_image = ImageTk.PhotoImage(self._source.resize(size, Image.LANCZOS))
            self._cache_key = (self._source, size)

        self.delete("photo")
        self.create_image(box[0] // 2, box[1] // 2, anchor="center", image=self._tk_image, tags=("photo",))
        self.tag_raise(self._caption)
