from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from photopost.app.errors import ResourceError

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_MAX_SIDE = 800


def load_image_rgb(path: Union[str, Path]) -> Image.Image:
    """Load an image, apply EXIF orientation, return an RGB PIL Image."""
    try:
        with Image.open(path) as src:
            img = ImageOps.exif_transpose(src)
            if img.mode != "RGB":
                img = img.convert("RGB")
            img.load()
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise ResourceError(f"Could not open image: {e}", path=path) from e
    return img


class PreviewHandle:
    """
    Decoded, downsized copy of the user's selected file, owned by one edit session.

    Must be released exactly once; ``release()`` reports whether this call did the release.
    """

    def __init__(self, source_path: Path, image: Image.Image):
        self.source_path = source_path
        self._image: Optional[Image.Image] = image
        self.release_count = 0

    @classmethod
    def open(cls, path: Union[str, Path], max_side: int = DEFAULT_PREVIEW_MAX_SIDE) -> "PreviewHandle":
        source = Path(path)
        if not source.is_file():
            raise ResourceError(f"No such file: {source}", path=source)
        img = load_image_rgb(source)
        if max(img.size) > max_side:
            img.thumbnail((max_side, max_side), Image.LANCZOS)
        logger.debug("Decoded preview for %s at %dx%d", source.name, img.width, img.height)
        return cls(source, img)

    @property
    def image(self) -> Optional[Image.Image]:
        return self._image

    @property
    def released(self) -> bool:
        return self._image is None

    def release(self) -> bool:
        if self._image is None:
            logger.warning("Preview for %s released twice", self.source_path)
            return False
        self._image.close()
        self._image = None
        self.release_count += 1
        return True
