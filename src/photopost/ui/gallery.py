from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict, List, Optional, Sequence

from PIL import Image, ImageOps, ImageTk

from photopost.core.effects import apply_effect, compute_effect
from photopost.core.gallery import FILTER_DEFAULT, FILTER_DISCUSSED, FILTER_RANDOM, Debouncer, GalleryStore
from photopost.core.models import EFFECTS, GalleryEntryDraft, Photo

logger = logging.getLogger(__name__)

THUMB_SIZE = (182, 182)
COLUMNS = 4

FILTER_LABELS = (
    (FILTER_DEFAULT, "Default"),
    (FILTER_RANDOM, "Random"),
    (FILTER_DISCUSSED, "Discussed"),
)


def styled_image(photo: Photo, image: Image.Image) -> Image.Image:
    """Apply the photo's stored effect at full strength, the way its style class renders it."""
    if photo.effect not in EFFECTS:
        return image
    return apply_effect(image, compute_effect(photo.effect, 100))


class Thumbnail(ttk.Frame):
    def __init__(self, master, photo: Photo, on_open: Callable[[Photo], None]):
        super().__init__(master, padding=4)
        self.photo = photo
        self._tk_image: Optional[ImageTk.PhotoImage] = None

        self.image_label = tk.Label(self, bg="#ddd", cursor="hand2")
        self.image_label.pack()
        self._show(Image.new("RGB", THUMB_SIZE, "#dddddd"))

        stats = ttk.Frame(self)
        stats.pack(fill="x", pady=(2, 0))
        self.comments_label = ttk.Label(stats, text=f"💬 {len(photo.comments)}")
        self.comments_label.pack(side="left")
        self.likes_label = ttk.Label(stats, text=f"♥ {photo.likes}")
        self.likes_label.pack(side="right")

        self.image_label.bind("<Button-1>", lambda _e: on_open(self.photo))

    def _show(self, image: Image.Image) -> None:
        self._tk_image = ImageTk.PhotoImage(image)
        self.image_label.configure(image=self._tk_image)

    def set_image(self, image: Image.Image) -> None:
        if not self.winfo_exists():
            return
        self._show(ImageOps.fit(styled_image(self.photo, image), THUMB_SIZE, Image.LANCZOS))


class ThumbnailGrid(ttk.Frame):
    """Scrollable grid of thumbnails; images are fetched in the background."""

    def __init__(self, master, *, load_image: Callable[[str], Image.Image], dispatcher,
                 on_open: Callable[[Photo], None]):
        super().__init__(master)
        self._load_image = load_image
        self._dispatcher = dispatcher
        self._on_open = on_open
        self.tiles: List[Thumbnail] = []
        self.scroll_enabled = True

        self._canvas = tk.Canvas(self, highlightthickness=0)
        self._scrollbar = ttk.Scrollbar(self, orient="vertical", command=self._canvas.yview)
        self._canvas.configure(yscrollcommand=self._scrollbar.set)
        self._scrollbar.pack(side="right", fill="y")
        self._canvas.pack(side="left", fill="both", expand=True)

        self.inner = ttk.Frame(self._canvas)
        self._canvas.create_window((0, 0), window=self.inner, anchor="nw")
        self.inner.bind("<Configure>", lambda _e: self._canvas.configure(scrollregion=self._canvas.bbox("all")))
        self._canvas.bind_all("<MouseWheel>", self._on_wheel, add="+")

    def _on_wheel(self, event) -> None:
        if self.scroll_enabled:
            self._canvas.yview_scroll(int(-event.delta / 120) or (-1 if event.delta > 0 else 1), "units")

    def clear(self) -> None:
        for tile in self.tiles:
            tile.destroy()
        self.tiles = []

    def render(self, photos: Sequence[Photo]) -> None:
        self.clear()
        for photo in photos:
            self.append(photo)

    def append(self, photo: Photo) -> Thumbnail:
        tile = Thumbnail(self.inner, photo, self._on_open)
        index = len(self.tiles)
        tile.grid(row=index // COLUMNS, column=index % COLUMNS, padx=4, pady=4)
        self.tiles.append(tile)

        url = photo.url
        self._dispatcher.submit(
            lambda: self._load_image(url),
            tile.set_image,
            lambda err: logger.debug("Thumbnail %s not loaded: %s", url, err),
        )
        return tile


class FilterBar(ttk.Frame):
    """Default / Random / Discussed. Disabled until photos are loaded; changes are debounced."""

    def __init__(self, master, *, on_filter: Callable[[str], None], debounce_ms: int = 500):
        super().__init__(master)
        self._on_filter = on_filter
        self._debounce = Debouncer(self.after, self.after_cancel, debounce_ms)
        self.active = FILTER_DEFAULT
        self.buttons: Dict[str, ttk.Button] = {}

        for filter_id, label in FILTER_LABELS:
            btn = ttk.Button(self, text=label, command=lambda f=filter_id: self.select(f))
            btn.pack(side="left", padx=(0, 4))
            self.buttons[filter_id] = btn
        self._mark_active()
        self.disable()

    def enable(self) -> None:
        for btn in self.buttons.values():
            btn.state(["!disabled"])

    def disable(self) -> None:
        for btn in self.buttons.values():
            btn.state(["disabled"])

    def select(self, filter_id: str) -> None:
        self.active = filter_id
        self._mark_active()
        self._debounce(self._on_filter, filter_id)

    def _mark_active(self) -> None:
        for filter_id, btn in self.buttons.items():
            btn.state(["pressed"] if filter_id == self.active else ["!pressed"])


class Gallery:
    """The page's photo collection: store plus grid. Accepts new entries one at a time."""

    def __init__(self, store: GalleryStore, grid: ThumbnailGrid):
        self.store = store
        self.grid = grid

    def render_thumbnails(self, photos: Sequence[Photo]) -> None:
        self.grid.render(photos)

    def load(self, photos: Sequence[Photo]) -> None:
        self.render_thumbnails(self.store.load(photos))

    def apply_filter(self, filter_id: str) -> None:
        self.render_thumbnails(self.store.filter(filter_id))

    def next_id(self) -> int:
        return self.store.next_id()

    def append_entry(self, draft: GalleryEntryDraft) -> None:
        photo = self.store.add(draft)
        self.grid.append(photo)
