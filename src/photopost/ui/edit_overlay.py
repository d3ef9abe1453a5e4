from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional

from photopost.core.effects import apply_effect
from photopost.core.models import (
    EFFECT_CHROME,
    EFFECT_HEAT,
    EFFECT_MARVIN,
    EFFECT_NONE,
    EFFECT_PHOBOS,
    EFFECT_SEPIA,
    EFFECTS,
    PreviewState,
)
from photopost.ui.image_canvas import PhotoCanvas
from photopost.ui.layers import KeyRouter, OverlayLayer
from photopost.validation.report import FIELD_DESCRIPTION, FIELD_HASHTAGS, ValidationReport

EFFECT_LABELS = {
    EFFECT_NONE: "Original",
    EFFECT_CHROME: "Chrome",
    EFFECT_SEPIA: "Sepia",
    EFFECT_MARVIN: "Marvin",
    EFFECT_PHOBOS: "Phobos",
    EFFECT_HEAT: "Heat",
}

ERROR_FG = "#c0392b"


class EditOverlay(OverlayLayer):
    """
    Upload form: preview, zoom, effect picker with intensity slider, hashtags and description.

    Purely a view: every user action is forwarded to the controller, and the
    controller pushes state back through render()/reset_fields()/show_validation().
    """

    def __init__(self, root: tk.Misc, keys: KeyRouter):
        super().__init__(root)
        self._keys = keys
        self._key_token: Optional[int] = None
        self._controller = None
        # set while the view writes its own widgets, so traces/commands don't echo back
        self._syncing = False

        self._build_layout()

    def attach(self, controller) -> None:
        self._controller = controller

    # ---------- UI construction ----------

    def _build_layout(self) -> None:
        body = self.body
        body.columnconfigure(0, weight=1)

        header = ttk.Frame(body)
        header.grid(row=0, column=0, sticky="ew")
        ttk.Label(header, text="New photo", font=("TkDefaultFont", 13, "bold")).pack(side="left")
        self.btn_close = ttk.Button(header, text="✕", width=3, command=self._on_close)
        self.btn_close.pack(side="right")

        self.preview = PhotoCanvas(body, placeholder="Loading…", width=560, height=400)
        self.preview.grid(row=1, column=0, sticky="nsew", pady=(8, 8))

        # Scale
        scale_row = ttk.Frame(body)
        scale_row.grid(row=2, column=0, sticky="w")
        ttk.Label(scale_row, text="Scale:").pack(side="left")
        self.btn_smaller = ttk.Button(scale_row, text="−", width=3, command=self._on_smaller)
        self.btn_smaller.pack(side="left", padx=(6, 0))
        self.scale_var = tk.StringVar(value="100%")
        ttk.Label(scale_row, textvariable=self.scale_var, width=6, anchor="center").pack(side="left")
        self.btn_bigger = ttk.Button(scale_row, text="+", width=3, command=self._on_bigger)
        self.btn_bigger.pack(side="left")

        # Effects
        effects_row = ttk.Frame(body)
        effects_row.grid(row=3, column=0, sticky="w", pady=(8, 0))
        self.effect_var = tk.StringVar(value=EFFECT_NONE)
        for effect in EFFECTS:
            ttk.Radiobutton(
                effects_row,
                text=EFFECT_LABELS.get(effect, effect),
                value=effect,
                variable=self.effect_var,
                command=self._on_effect,
            ).pack(side="left", padx=(0, 8))

        # Intensity; grid_remove() keeps its slot so it reappears in place
        self.intensity_frame = ttk.Frame(body)
        self.intensity_frame.grid(row=4, column=0, sticky="ew", pady=(6, 0))
        self.intensity_frame.columnconfigure(0, weight=1)
        self.slider = ttk.Scale(self.intensity_frame, from_=0, to=100, orient="horizontal",
                                command=self._on_slider)
        self.slider.grid(row=0, column=0, sticky="ew")
        self.level_var = tk.StringVar(value="")
        ttk.Label(self.intensity_frame, textvariable=self.level_var, width=4).grid(row=0, column=1, padx=(6, 0))
        self.filter_var = tk.StringVar(value="")
        ttk.Label(self.intensity_frame, textvariable=self.filter_var, foreground="#777").grid(
            row=1, column=0, columnspan=2, sticky="w")
        self.intensity_frame.grid_remove()

        # Text fields
        fields = ttk.Frame(body)
        fields.grid(row=5, column=0, sticky="ew", pady=(10, 0))
        fields.columnconfigure(1, weight=1)

        ttk.Label(fields, text="Hashtags:").grid(row=0, column=0, sticky="w", pady=3)
        self.hashtags_var = tk.StringVar()
        self.hashtags_entry = ttk.Entry(fields, textvariable=self.hashtags_var)
        self.hashtags_entry.grid(row=0, column=1, sticky="ew", pady=3)
        self.hashtags_error = ttk.Label(fields, text="", foreground=ERROR_FG)
        self.hashtags_error.grid(row=1, column=1, sticky="w")

        ttk.Label(fields, text="Description:").grid(row=2, column=0, sticky="w", pady=3)
        self.description_var = tk.StringVar()
        self.description_entry = ttk.Entry(fields, textvariable=self.description_var)
        self.description_entry.grid(row=2, column=1, sticky="ew", pady=3)
        self.description_error = ttk.Label(fields, text="", foreground=ERROR_FG)
        self.description_error.grid(row=3, column=1, sticky="w")

        self.hashtags_var.trace_add("write", lambda *_: self._on_text_changed(FIELD_HASHTAGS))
        self.description_var.trace_add("write", lambda *_: self._on_text_changed(FIELD_DESCRIPTION))

        # Buttons
        buttons = ttk.Frame(body)
        buttons.grid(row=6, column=0, sticky="e", pady=(10, 0))
        self.btn_cancel = ttk.Button(buttons, text="Cancel", command=self._on_close)
        self.btn_cancel.pack(side="right")
        self.btn_submit = ttk.Button(buttons, text="Publish", command=self._on_submit)
        self.btn_submit.pack(side="right", padx=(0, 6))

    # ---------- Widget callbacks -> controller ----------

    def _on_close(self) -> None:
        if self._controller is not None:
            self._controller.close()

    def _on_smaller(self) -> None:
        if self._controller is not None:
            self._controller.decrease_scale()

    def _on_bigger(self) -> None:
        if self._controller is not None:
            self._controller.increase_scale()

    def _on_effect(self) -> None:
        if self._controller is not None and not self._syncing:
            self._controller.select_effect(self.effect_var.get())

    def _on_slider(self, value: str) -> None:
        if self._controller is not None and not self._syncing:
            self._controller.set_intensity(value)

    def _on_text_changed(self, field: str) -> None:
        if self._controller is None or self._syncing:
            return
        if field == FIELD_HASHTAGS:
            self._controller.set_hashtags(self.hashtags_var.get())
        else:
            self._controller.set_description(self.description_var.get())

    def _on_submit(self) -> None:
        if self._controller is not None:
            self._controller.submit()

    # ---------- View interface used by EditSessionController ----------

    def show_overlay(self) -> None:
        self.show()
        self.btn_submit.focus_set()

    def hide_overlay(self) -> None:
        self.hide()
        self.preview.clear()

    def render(self, state: PreviewState) -> None:
        image = state.image
        if image is not None:
            image = apply_effect(image, state.descriptor)
        self.preview.show(image, zoom=state.transform.scale_factor, caption=state.transform.effect_class)
        self.scale_var.set(f"{state.scale_percent}%")

        self._syncing = True
        try:
            self.effect_var.set(state.effect)
            if state.intensity_visible:
                self.intensity_frame.grid()
                self.slider.set(state.intensity)
                self.level_var.set(str(state.intensity))
                self.filter_var.set(state.transform.filter_css)
            else:
                self.intensity_frame.grid_remove()
                self.level_var.set("")
                self.filter_var.set("")
        finally:
            self._syncing = False

    def set_submit_enabled(self, enabled: bool) -> None:
        self.btn_submit.state(["!disabled"] if enabled else ["disabled"])

    def show_validation(self, report: Optional[ValidationReport]) -> None:
        for field, label in ((FIELD_HASHTAGS, self.hashtags_error), (FIELD_DESCRIPTION, self.description_error)):
            result = report.for_field(field) if report is not None else None
            label.configure(text=result.message if result is not None and not result.valid else "")

    def reset_fields(self, hashtags: str, description: str, effect: str) -> None:
        self._syncing = True
        try:
            self.hashtags_var.set(hashtags)
            self.description_var.set(description)
            self.effect_var.set(effect)
        finally:
            self._syncing = False

    def bind_keys(self, callback) -> None:
        self.unbind_keys()
        self._key_token = self._keys.add(callback)

    def unbind_keys(self) -> None:
        if self._key_token is not None:
            self._keys.remove(self._key_token)
            self._key_token = None

    def is_typing(self) -> bool:
        focus = self.focus_get()
        return focus in (self.hashtags_entry, self.description_entry)
