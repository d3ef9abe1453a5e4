from __future__ import annotations

import math
from typing import Any

import numpy as np
from PIL import Image, ImageFilter

from photopost.core.models import (
    EFFECT_CHROME,
    EFFECT_HEAT,
    EFFECT_MARVIN,
    EFFECT_NONE,
    EFFECT_PHOBOS,
    EFFECT_SEPIA,
    EFFECTS,
    EffectDescriptor,
)

INTENSITY_MIN = 0
INTENSITY_MAX = 100
INTENSITY_DEFAULT = 100

PHOBOS_MAX_BLUR_PX = 3.0
HEAT_MAX_BRIGHTNESS = 3.0

# Filter-effects matrices (amount = 1); interpolated from identity for partial amounts.
_GRAYSCALE_FULL = np.array(
    [
        [0.2126, 0.7152, 0.0722],
        [0.2126, 0.7152, 0.0722],
        [0.2126, 0.7152, 0.0722],
    ],
    dtype=np.float32,
)
_SEPIA_FULL = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float32,
)
_IDENTITY = np.eye(3, dtype=np.float32)


def preview_class_name(effect: str) -> str:
    """Style class for a stored effect; empty for ``none`` or unknown ids."""
    if not effect or effect == EFFECT_NONE or effect not in EFFECTS:
        return ""
    return f"effects__preview--{effect}"


def normalize_intensity(value: Any) -> int:
    """Coerce a slider value to an int in [0, 100]; non-numeric input means the slider default."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return INTENSITY_DEFAULT
    if math.isnan(v):
        return INTENSITY_DEFAULT
    v = min(max(v, INTENSITY_MIN), INTENSITY_MAX)
    return int(math.floor(v + 0.5))


def compute_effect(effect: str, intensity: Any) -> EffectDescriptor:
    """
    Map (effect, intensity 0..100) to an EffectDescriptor.

    Pure: called on every slider tick, same input always gives the same output.
    """
    if not effect or effect == EFFECT_NONE:
        return EffectDescriptor()
    if effect not in EFFECTS:
        raise ValueError(f"Unknown effect: {effect!r}")

    v = normalize_intensity(intensity)
    cls = preview_class_name(effect)

    if effect == EFFECT_CHROME:
        amount = round(v / 100, 2)
        return EffectDescriptor(effect, cls, f"grayscale({amount:.2f})", amount)
    if effect == EFFECT_SEPIA:
        amount = round(v / 100, 2)
        return EffectDescriptor(effect, cls, f"sepia({amount:.2f})", amount)
    if effect == EFFECT_MARVIN:
        return EffectDescriptor(effect, cls, f"invert({v}%)", float(v))
    if effect == EFFECT_PHOBOS:
        amount = round(v / 100 * PHOBOS_MAX_BLUR_PX, 2)
        return EffectDescriptor(effect, cls, f"blur({amount:.2f}px)", amount)

    # heat
    amount = round(1 + v / 100 * (HEAT_MAX_BRIGHTNESS - 1), 2)
    return EffectDescriptor(effect, cls, f"brightness({amount:.2f})", amount)


def _apply_matrix(arr: np.ndarray, full: np.ndarray, amount: float) -> np.ndarray:
    m = _IDENTITY + (full - _IDENTITY) * float(amount)
    return arr @ m.T


def apply_effect(image: Image.Image, descriptor: EffectDescriptor) -> Image.Image:
    """Render a descriptor onto a PIL image (returns a new image; ``none`` returns the input)."""
    if descriptor.effect == EFFECT_NONE or descriptor.amount is None:
        return image

    if image.mode != "RGB":
        image = image.convert("RGB")

    if descriptor.effect == EFFECT_PHOBOS:
        if descriptor.amount <= 0:
            return image.copy()
        return image.filter(ImageFilter.GaussianBlur(radius=descriptor.amount))

    arr = np.asarray(image).astype(np.float32)

    if descriptor.effect == EFFECT_CHROME:
        out = _apply_matrix(arr, _GRAYSCALE_FULL, descriptor.amount)
    elif descriptor.effect == EFFECT_SEPIA:
        out = _apply_matrix(arr, _SEPIA_FULL, descriptor.amount)
    elif descriptor.effect == EFFECT_MARVIN:
        p = descriptor.amount / 100.0
        out = arr * (1.0 - 2.0 * p) + 255.0 * p
    elif descriptor.effect == EFFECT_HEAT:
        out = arr * descriptor.amount
    else:
        raise ValueError(f"Unknown effect: {descriptor.effect!r}")

    out = np.clip(np.rint(out), 0, 255).astype(np.uint8)
    return Image.fromarray(out, "RGB")
