from __future__ import annotations

import random
from typing import Any, Callable, List, Optional, Sequence

from photopost.core.models import Comment, GalleryEntryDraft, Photo

FILTER_DEFAULT = "filter-default"
FILTER_RANDOM = "filter-random"
FILTER_DISCUSSED = "filter-discussed"
FILTERS = (FILTER_DEFAULT, FILTER_RANDOM, FILTER_DISCUSSED)

RANDOM_PHOTO_LIMIT = 10
COMMENTS_BATCH_SIZE = 5
DEBOUNCE_DELAY_MS = 500


def pick_random(photos: Sequence[Photo], limit: int = RANDOM_PHOTO_LIMIT,
                rng: Optional[random.Random] = None) -> List[Photo]:
    """Shuffled copy of ``photos``, at most ``limit`` long. The input is left untouched."""
    rng = rng or random.Random()
    copy = list(photos)
    rng.shuffle(copy)
    return copy[: max(0, min(limit, len(copy)))]


def pick_most_discussed(photos: Sequence[Photo]) -> List[Photo]:
    return sorted(photos, key=lambda p: len(p.comments), reverse=True)


def apply_filter(filter_id: str, photos: Sequence[Photo], *, limit: int = RANDOM_PHOTO_LIMIT,
                 rng: Optional[random.Random] = None) -> List[Photo]:
    if filter_id == FILTER_RANDOM:
        return pick_random(photos, limit=limit, rng=rng)
    if filter_id == FILTER_DISCUSSED:
        return pick_most_discussed(photos)
    return list(photos)


class Debouncer:
    """
    Delay a call until ``delay_ms`` passed without another call; the last call wins.

    ``schedule(delay_ms, fn) -> token`` and ``cancel(token)`` are injected
    (``widget.after`` / ``widget.after_cancel`` in the GUI).
    """

    def __init__(self, schedule: Callable[[int, Callable[[], None]], Any],
                 cancel: Callable[[Any], None], delay_ms: int = DEBOUNCE_DELAY_MS):
        self._schedule = schedule
        self._cancel = cancel
        self.delay_ms = delay_ms
        self._pending: Any = None

    def __call__(self, fn: Callable[..., Any], *args: Any) -> None:
        if self._pending is not None:
            self._cancel(self._pending)

        def fire() -> None:
            self._pending = None
            fn(*args)

        self._pending = self._schedule(self.delay_ms, fire)

    @property
    def pending(self) -> bool:
        return self._pending is not None


class CommentPager:
    """Reveals a photo's comments in batches ("Load more")."""

    def __init__(self, comments: Sequence[Comment], batch_size: int = COMMENTS_BATCH_SIZE):
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        self._comments = list(comments)
        self.batch_size = batch_size
        self.shown = 0

    @property
    def total(self) -> int:
        return len(self._comments)

    @property
    def has_more(self) -> bool:
        return self.shown < self.total

    @property
    def status_text(self) -> str:
        return f"{self.shown} of {self.total} comments"

    def next_batch(self) -> List[Comment]:
        batch = self._comments[self.shown : self.shown + self.batch_size]
        self.shown += len(batch)
        return batch


class GalleryStore:
    """All photos known to the page plus the currently displayed selection."""

    def __init__(self, random_limit: int = RANDOM_PHOTO_LIMIT, rng: Optional[random.Random] = None):
        self.all_photos: List[Photo] = []
        self.displayed: List[Photo] = []
        self.random_limit = random_limit
        self._rng = rng

    def load(self, photos: Sequence[Photo]) -> List[Photo]:
        self.all_photos = list(photos)
        self.displayed = list(self.all_photos)
        return self.displayed

    def filter(self, filter_id: str) -> List[Photo]:
        self.displayed = apply_filter(filter_id, self.all_photos, limit=self.random_limit, rng=self._rng)
        return self.displayed

    def next_id(self) -> int:
        return len(self.all_photos) + 1

    def add(self, draft: GalleryEntryDraft) -> Photo:
        photo = Photo.from_draft(draft)
        self.all_photos.append(photo)
        self.displayed.append(photo)
        return photo
