from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Hashable, List, Optional

from photopost.app.preview import PreviewHandle
from photopost.core.effects import INTENSITY_DEFAULT, compute_effect
from photopost.core.models import EFFECT_NONE, EditForm, PreviewState, PreviewTransform
from photopost.core.scale import ScaleController

logger = logging.getLogger(__name__)


@dataclass
class EditSession:
    """
    Mutable state of the single active edit session.

    The controller mutates it through its handlers and renders ``snapshot()``;
    views never write to it directly.
    """
    default_effect: str = EFFECT_NONE

    # Input
    source_path: Optional[Path] = None
    preview: Optional[PreviewHandle] = None

    # Preview controls
    effect: str = field(init=False, default=EFFECT_NONE)
    intensity: int = INTENSITY_DEFAULT
    scale: ScaleController = field(default_factory=ScaleController)

    # Text fields
    hashtags: str = ""
    description: str = ""

    # Lifecycle
    is_open: bool = False
    submitting: bool = False
    errors_shown: bool = False

    def __post_init__(self) -> None:
        self.effect = self.default_effect

    @property
    def intensity_visible(self) -> bool:
        return self.effect != EFFECT_NONE

    @property
    def scale_percent(self) -> int:
        return self.scale.value

    def reset(self) -> None:
        """Restore every control to its default. Does not release the preview (the controller does)."""
        self.source_path = None
        self.preview = None
        self.effect = self.default_effect
        self.intensity = INTENSITY_DEFAULT
        self.scale.reset()
        self.hashtags = ""
        self.description = ""
        self.is_open = False
        self.submitting = False
        self.errors_shown = False

    def snapshot(self) -> PreviewState:
        descriptor = compute_effect(self.effect, self.intensity)
        transform = PreviewTransform(
            effect_class=descriptor.preview_class_name,
            filter_css=descriptor.filter_css,
            scale_factor=self.scale.current_transform(),
        )
        return PreviewState(
            image=self.preview.image if self.preview is not None else None,
            effect=self.effect,
            intensity=self.intensity,
            intensity_visible=self.intensity_visible,
            scale_percent=self.scale.value,
            descriptor=descriptor,
            transform=transform,
        )

    def to_form(self) -> EditForm:
        if self.source_path is None:
            raise ValueError("No file selected")
        return EditForm(
            source_path=self.source_path,
            hashtags=self.hashtags,
            description=self.description,
            effect=self.effect,
            intensity=self.intensity,
            scale_percent=self.scale.value,
        )


class ModalMarker:
    """
    Page-wide "a modal is open" flag.

    Each modal acquires it under its own owner key; the flag stays set until
    every owner has released it, so overlapping modals cannot clear it for each other.
    """

    def __init__(self) -> None:
        self._owners: List[Hashable] = []
        self._listeners = []

    @property
    def active(self) -> bool:
        return bool(self._owners)

    @property
    def owners(self) -> List[Hashable]:
        return list(self._owners)

    def subscribe(self, callback) -> None:
        """``callback(active: bool)`` runs whenever the flag flips."""
        self._listeners.append(callback)

    def acquire(self, owner: Hashable) -> None:
        if owner in self._owners:
            return
        was_active = self.active
        self._owners.append(owner)
        if len(self._owners) > 1:
            logger.debug("Modal %r opened while %r is active", owner, self._owners[:-1])
        if not was_active:
            self._notify()

    def release(self, owner: Hashable) -> None:
        if owner not in self._owners:
            return
        self._owners.remove(owner)
        if not self.active:
            self._notify()

    def _notify(self) -> None:
        for cb in list(self._listeners):
            cb(self.active)
