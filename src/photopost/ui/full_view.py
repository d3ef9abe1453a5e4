from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from PIL import Image

from photopost.app.state import ModalMarker
from photopost.core.gallery import COMMENTS_BATCH_SIZE, CommentPager
from photopost.core.keys import handle_escape_press
from photopost.core.models import Comment, Photo
from photopost.ui.gallery import styled_image
from photopost.ui.image_canvas import PhotoCanvas
from photopost.ui.layers import KeyRouter, OverlayLayer

logger = logging.getLogger(__name__)

MODAL_OWNER = "full-view"


class FullView(OverlayLayer):
    """Full-size photo with likes, caption and comments revealed in batches."""

    def __init__(self, root: tk.Misc, keys: KeyRouter, modal: ModalMarker, *,
                 load_image: Callable[[str], Image.Image], dispatcher,
                 batch_size: int = COMMENTS_BATCH_SIZE):
        super().__init__(root)
        self._keys = keys
        self._modal = modal
        self._load_image = load_image
        self._dispatcher = dispatcher
        self._batch_size = batch_size
        self._key_token: Optional[int] = None
        self._pager: Optional[CommentPager] = None
        self.photo: Optional[Photo] = None

        self._build_layout()

    def _build_layout(self) -> None:
        body = self.body
        body.columnconfigure(0, weight=1)

        header = ttk.Frame(body)
        header.grid(row=0, column=0, columnspan=2, sticky="ew")
        self.likes_var = tk.StringVar()
        ttk.Label(header, textvariable=self.likes_var).pack(side="left")
        self.btn_close = ttk.Button(header, text="✕", width=3, command=self.close)
        self.btn_close.pack(side="right")

        self.image = PhotoCanvas(body, placeholder="Loading…", width=520, height=420)
        self.image.grid(row=1, column=0, sticky="nsew", pady=(8, 0))

        side = ttk.Frame(body, padding=(12, 0, 0, 0))
        side.grid(row=1, column=1, sticky="ns")
        self.caption = ttk.Label(side, text="", wraplength=280, justify="left")
        self.caption.pack(anchor="w", pady=(8, 8))
        self.status = ttk.Label(side, text="")
        self.status.pack(anchor="w")
        self.comments_box = ttk.Frame(side)
        self.comments_box.pack(fill="both", expand=True, pady=(6, 6))
        self.btn_more = ttk.Button(side, text="Load more", command=self.show_more)
        self.btn_more.pack(anchor="w")

    def open(self, photo: Photo) -> None:
        self.photo = photo
        self.likes_var.set(f"♥ {photo.likes}   💬 {len(photo.comments)}")
        self.caption.configure(text=photo.description)
        self.image.clear()
        for child in self.comments_box.winfo_children():
            child.destroy()

        self._pager = CommentPager(photo.comments, self._batch_size)
        self.show_more()
        if self._pager.total == 0:
            self.status.pack_forget()
        else:
            self.status.pack(anchor="w", before=self.comments_box)

        self.show()
        self._modal.acquire(MODAL_OWNER)
        self._keys.remove(self._key_token)
        self._key_token = self._keys.add(lambda evt: handle_escape_press(evt, self.close))

        url = photo.url
        self._dispatcher.submit(
            lambda: self._load_image(url),
            lambda img: self._set_image(photo, img),
            lambda err: logger.warning("Could not load %s: %s", url, err),
        )

    def _set_image(self, photo: Photo, image: Image.Image) -> None:
        if self.photo is photo and self.visible:
            self.image.show(styled_image(photo, image))

    def show_more(self) -> None:
        if self._pager is None:
            return
        for comment in self._pager.next_batch():
            self._add_comment(comment)
        self.status.configure(text=self._pager.status_text)
        if self._pager.has_more:
            self.btn_more.pack(anchor="w")
        else:
            self.btn_more.pack_forget()

    def _add_comment(self, comment: Comment) -> None:
        item = ttk.Frame(self.comments_box)
        item.pack(fill="x", anchor="w", pady=2)
        ttk.Label(item, text=comment.name, font=("TkDefaultFont", 9, "bold")).pack(anchor="w")
        ttk.Label(item, text=comment.message, wraplength=280, justify="left").pack(anchor="w")

    def close(self) -> None:
        if not self.visible:
            return
        self.hide()
        self.image.clear()
        self._keys.remove(self._key_token)
        self._key_token = None
        self._modal.release(MODAL_OWNER)
        self.photo = None
