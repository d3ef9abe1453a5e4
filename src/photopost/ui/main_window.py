from __future__ import annotations

import logging
import os
import tkinter as tk
from functools import partial
from tkinter import filedialog, ttk
from typing import List, Optional

from photopost.app.config import CONFIG_PATH_ENV, AppConfig
from photopost.app.controller import EditSessionController
from photopost.app.preview import PreviewHandle
from photopost.app.state import ModalMarker
from photopost.app.submission import SubmissionPipeline
from photopost.core.gallery import GalleryStore
from photopost.core.models import Photo
from photopost.net.api import PhotoApi
from photopost.ui.dispatch import TkDispatcher
from photopost.ui.edit_overlay import EditOverlay
from photopost.ui.full_view import FullView
from photopost.ui.gallery import FilterBar, Gallery, ThumbnailGrid
from photopost.ui.layers import KeyRouter
from photopost.ui.messages import NoticeCenter

logger = logging.getLogger(__name__)

IMAGE_FILETYPES = [
    ("Image files", "*.jpg *.jpeg *.png *.gif *.bmp *.webp"),
    ("All files", "*.*"),
]


class PhotoPostApp(ttk.Frame):
    """Gallery page: thumbnails, filters, full view, and the upload/edit overlay."""

    def __init__(self, master: tk.Tk, config: AppConfig, api: PhotoApi):
        super().__init__(master)
        self.master = master
        self.settings = config
        self.api = api

        self.dispatcher = TkDispatcher(master)
        self.keys = KeyRouter(master)
        self.modal = ModalMarker()
        self.notices = NoticeCenter(master, self.keys)

        self._build_style()
        self._build_layout()
        self._bind_shortcuts()

        self.store = GalleryStore(random_limit=config.random_photo_limit)
        self.gallery = Gallery(self.store, self.thumbnails)

        self.full_view = FullView(
            master, self.keys, self.modal,
            load_image=self.api.fetch_image,
            dispatcher=self.dispatcher,
            batch_size=config.comments_batch_size,
        )
        self.edit_overlay = EditOverlay(master, self.keys)
        self.controller = EditSessionController(
            view=self.edit_overlay,
            pipeline=SubmissionPipeline(self.api),
            gallery=self.gallery,
            notifier=self.notices,
            modal=self.modal,
            dispatcher=self.dispatcher,
            preview_loader=partial(PreviewHandle.open, max_side=config.preview_max_side),
        )
        self.edit_overlay.attach(self.controller)
        self.modal.subscribe(self._on_modal_change)

        self.set_status("Ready.")

    # ---------- UI construction ----------

    def _build_style(self) -> None:
        style = ttk.Style(self.master)
        if "clam" in style.theme_names():
            style.theme_use("clam")

    def _build_layout(self) -> None:
        self.pack(fill="both", expand=True)

        toolbar = ttk.Frame(self, padding=(10, 8))
        toolbar.pack(side="top", fill="x")

        self.btn_upload = ttk.Button(toolbar, text="Upload photo", command=self.on_upload)
        self.btn_upload.pack(side="left")
        ttk.Separator(toolbar, orient="vertical").pack(side="left", fill="y", padx=8)
        self.filter_bar = FilterBar(toolbar, on_filter=self.on_filter, debounce_ms=self.settings.debounce_ms)
        self.filter_bar.pack(side="left")

        self.thumbnails = ThumbnailGrid(
            self,
            load_image=self.api.fetch_image,
            dispatcher=self.dispatcher,
            on_open=self.on_open_photo,
        )
        self.thumbnails.pack(side="top", fill="both", expand=True, padx=10, pady=(0, 10))

        status = ttk.Frame(self, padding=(10, 6))
        status.pack(side="bottom", fill="x")
        self.status_var = tk.StringVar(value="Ready.")
        ttk.Label(status, textvariable=self.status_var).pack(side="left")

    def _bind_shortcuts(self) -> None:
        self.master.bind_all("<Control-o>", lambda e: self.on_upload())
        self.master.bind_all("<Command-o>", lambda e: self.on_upload())

    # ---------- Utilities ----------

    def set_status(self, text: str) -> None:
        self.status_var.set(text)

    def _on_modal_change(self, active: bool) -> None:
        # page behind a modal: no scrolling, no new uploads
        self.thumbnails.scroll_enabled = not active
        self.btn_upload.state(["disabled"] if active else ["!disabled"])

    # ---------- Gallery ----------

    def load(self) -> None:
        self.set_status("Loading photos…")
        self.dispatcher.submit(self.api.get_data, self._on_loaded, self._on_load_failed)

    def _on_loaded(self, photos: List[Photo]) -> None:
        self.gallery.load(photos)
        self.filter_bar.enable()
        self.set_status(f"{len(photos)} photos.")

    def _on_load_failed(self, err: BaseException) -> None:
        logger.warning("Loading photos failed: %s", err)
        self.notices.show_message("error", title="Could not load photos")
        self.set_status("Loading failed.")

    def on_filter(self, filter_id: str) -> None:
        self.gallery.apply_filter(filter_id)

    def on_open_photo(self, photo: Photo) -> None:
        if self.modal.active:
            return
        self.full_view.open(photo)

    # ---------- Upload ----------

    def on_upload(self) -> None:
        if self.modal.active:
            return
        path = filedialog.askopenfilename(title="Select a photo", filetypes=IMAGE_FILETYPES)
        if not path:
            return
        if self.controller.open(path):
            self.set_status(f"Editing {os.path.basename(path)}.")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(config: Optional[AppConfig] = None) -> None:
    config = config or AppConfig.load(os.environ.get(CONFIG_PATH_ENV))
    configure_logging(config.log_level)

    root = tk.Tk()
    root.title("PhotoPost")
    root.geometry("1000x760")
    root.minsize(820, 640)

    api = PhotoApi(config.base_url, timeout=config.timeout)
    app = PhotoPostApp(root, config, api)
    app.load()

    root.mainloop()
