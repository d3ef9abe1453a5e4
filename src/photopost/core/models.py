from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple

EFFECT_NONE = "none"
EFFECT_CHROME = "chrome"
EFFECT_SEPIA = "sepia"
EFFECT_MARVIN = "marvin"
EFFECT_PHOBOS = "phobos"
EFFECT_HEAT = "heat"

# Order matches the radio buttons in the edit overlay.
EFFECTS: Tuple[str, ...] = (
    EFFECT_NONE,
    EFFECT_CHROME,
    EFFECT_SEPIA,
    EFFECT_MARVIN,
    EFFECT_PHOBOS,
    EFFECT_HEAT,
)


@dataclass(frozen=True)
class EffectDescriptor:
    """
    Visual filter derived from (effect, intensity).

    preview_class_name:
        Style class naming the effect, e.g. ``effects__preview--sepia``. Empty for ``none``.
    filter_css:
        Filter expression in CSS notation, e.g. ``sepia(0.60)``. Empty for ``none``.
    amount:
        The numeric value embedded in ``filter_css`` (None for ``none``).
    """
    effect: str = EFFECT_NONE
    preview_class_name: str = ""
    filter_css: str = ""
    amount: Optional[float] = None


@dataclass(frozen=True)
class PreviewTransform:
    """Everything the preview needs besides the pixels: effect class, filter and zoom."""
    effect_class: str = ""
    filter_css: str = ""
    scale_factor: float = 1.0


@dataclass(frozen=True)
class PreviewState:
    """Snapshot of an edit session consumed by a single render call."""
    image: Any
    effect: str
    intensity: int
    intensity_visible: bool
    scale_percent: int
    descriptor: EffectDescriptor
    transform: PreviewTransform


@dataclass(frozen=True)
class EditForm:
    """Form values captured at the moment a submission starts."""
    source_path: Path
    hashtags: str = ""
    description: str = ""
    effect: str = EFFECT_NONE
    intensity: int = 100
    scale_percent: int = 100


@dataclass(frozen=True)
class Comment:
    id: int
    avatar: str
    message: str
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "Comment":
        if not isinstance(data, dict):
            raise TypeError(f"Comment must be an object, got {type(data).__name__}")
        return cls(
            id=int(data.get("id", 0)),
            avatar=str(data.get("avatar", "")),
            message=str(data.get("message", "")),
            name=str(data.get("name", "")),
        )


@dataclass(frozen=True)
class GalleryEntryDraft:
    """A freshly published photo, handed over to the gallery on successful submission."""
    id: int
    url: str
    description: str = ""
    likes: int = 0
    comments: Tuple[Comment, ...] = ()
    effect: str = EFFECT_NONE


@dataclass(frozen=True)
class Photo:
    id: int
    url: str
    description: str = ""
    likes: int = 0
    comments: Tuple[Comment, ...] = field(default_factory=tuple)
    effect: str = EFFECT_NONE

    @classmethod
    def from_dict(cls, data: dict) -> "Photo":
        if not isinstance(data, dict):
            raise TypeError(f"Photo must be an object, got {type(data).__name__}")
        comments = tuple(Comment.from_dict(c) for c in (data.get("comments") or []))
        return cls(
            id=int(data["id"]),
            url=str(data["url"]),
            description=str(data.get("description") or ""),
            likes=int(data.get("likes") or 0),
            comments=comments,
            effect=str(data.get("effect") or EFFECT_NONE),
        )

    @classmethod
    def from_draft(cls, draft: GalleryEntryDraft) -> "Photo":
        return cls(
            id=draft.id,
            url=draft.url,
            description=draft.description,
            likes=draft.likes,
            comments=tuple(draft.comments),
            effect=draft.effect,
        )
