from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

from photopost.app.errors import ConfigurationError, ResourceError, TransportError
from photopost.app.preview import PreviewHandle
from photopost.app.state import EditSession, ModalMarker
from photopost.core.effects import normalize_intensity
from photopost.core.keys import handle_escape_press
from photopost.core.models import EFFECT_NONE, EFFECTS, EditForm, GalleryEntryDraft
from photopost.validation.report import ValidationReport
from photopost.validation.validator import validate_form

logger = logging.getLogger(__name__)

MODAL_OWNER = "edit-overlay"

NOTICE_SUCCESS = "success"
NOTICE_ERROR = "error"


class EditSessionController:
    """
    Drives one edit session: Closed -> Open -> Submitting -> Closed | Open(error).

    Collaborators (all required):

    view
        show_overlay(), hide_overlay(), render(state), set_submit_enabled(bool),
        show_validation(report), reset_fields(hashtags, description, effect),
        bind_keys(callback), unbind_keys(), is_typing() -> bool
    pipeline
        submit(form) -> ack, raises TransportError
    gallery
        next_id() -> int, append_entry(draft)
    notifier
        show_message(kind, title=None)
    modal
        ModalMarker shared by every modal of the page
    dispatcher
        submit(work, on_success, on_failure); completions run on the UI thread
    """

    def __init__(
        self,
        view,
        pipeline,
        gallery,
        notifier,
        modal: ModalMarker,
        dispatcher,
        *,
        preview_loader: Callable[[Union[str, Path]], PreviewHandle] = PreviewHandle.open,
        default_effect: str = EFFECT_NONE,
    ):
        required = {
            "view": view,
            "pipeline": pipeline,
            "gallery": gallery,
            "notifier": notifier,
            "modal": modal,
            "dispatcher": dispatcher,
        }
        missing = [name for name, dep in required.items() if dep is None]
        if missing:
            raise ConfigurationError(f"EditSessionController needs: {', '.join(missing)}")
        if default_effect not in EFFECTS:
            raise ConfigurationError(f"Unknown default effect: {default_effect!r}")

        self.view = view
        self.pipeline = pipeline
        self.gallery = gallery
        self.notifier = notifier
        self.modal = modal
        self.dispatcher = dispatcher
        self.preview_loader = preview_loader

        self.session = EditSession(default_effect=default_effect)
        # bumped on every teardown so late submission results can tell they are stale
        self._generation = 0
        self.last_error: Optional[TransportError] = None

    # ---------- Lifecycle ----------

    def open(self, path: Union[str, Path]) -> bool:
        """Entry point for a file selection. Returns False if the file could not be decoded."""
        try:
            handle = self.preview_loader(path)
        except ResourceError as e:
            logger.warning("Could not open %s: %s", path, e)
            self.notifier.show_message(NOTICE_ERROR, title="Could not open the image")
            return False

        s = self.session
        if s.is_open:
            # new selection supersedes the current preview; controls keep their values
            self._release_preview()
            s.preview = handle
            s.source_path = handle.source_path
            self.render()
            return True

        s.reset()
        s.preview = handle
        s.source_path = handle.source_path
        s.is_open = True

        self.view.reset_fields(s.hashtags, s.description, s.effect)
        self.view.set_submit_enabled(True)
        self.view.show_overlay()
        self.modal.acquire(MODAL_OWNER)
        self.view.bind_keys(self.on_key)
        self.render()
        logger.debug("Edit session opened for %s", handle.source_path)
        return True

    def close(self) -> None:
        """Cancel button, close control or Escape: leave without publishing."""
        if not self.session.is_open:
            return
        self._teardown()

    def _teardown(self) -> None:
        s = self.session
        self._release_preview()
        s.reset()
        self._generation += 1

        self.view.reset_fields(s.hashtags, s.description, s.effect)
        self.view.show_validation(None)
        self.view.hide_overlay()
        self.modal.release(MODAL_OWNER)
        self.view.unbind_keys()
        self.view.set_submit_enabled(True)
        logger.debug("Edit session closed")

    def _release_preview(self) -> None:
        handle = self.session.preview
        self.session.preview = None
        if handle is not None:
            handle.release()

    def on_key(self, event: Any) -> Optional[str]:
        if not self.session.is_open or self.view.is_typing():
            return None
        return handle_escape_press(event, self.close)

    # ---------- Preview controls ----------

    def render(self) -> None:
        self.view.render(self.session.snapshot())

    def increase_scale(self) -> None:
        self.session.scale.increase()
        self.render()

    def decrease_scale(self) -> None:
        self.session.scale.decrease()
        self.render()

    def set_scale(self, raw: Any) -> None:
        self.session.scale.set_value(raw)
        self.render()

    def select_effect(self, effect: str) -> None:
        if effect not in EFFECTS:
            logger.warning("Ignoring unknown effect %r", effect)
            return
        self.session.effect = effect
        self.render()

    def set_intensity(self, value: Any) -> None:
        self.session.intensity = normalize_intensity(value)
        if self.session.effect != EFFECT_NONE:
            self.render()

    # ---------- Text fields ----------

    def set_hashtags(self, text: str) -> None:
        self.session.hashtags = text
        self._revalidate()

    def set_description(self, text: str) -> None:
        self.session.description = text
        self._revalidate()

    def _revalidate(self) -> None:
        if self.session.errors_shown:
            report = self.validate()
            self.view.show_validation(report)
            self.session.errors_shown = not report.passed

    def validate(self) -> ValidationReport:
        return validate_form(self.session.hashtags, self.session.description)

    # ---------- Submission ----------

    def submit(self) -> bool:
        """Entry point for the form's submit action. Returns True if a submission was started."""
        s = self.session
        if not s.is_open or s.submitting:
            return False

        report = self.validate()
        self.view.show_validation(report)
        if not report.passed:
            s.errors_shown = True
            return False
        s.errors_shown = False

        form = s.to_form()
        generation = self._generation
        s.submitting = True
        self.view.set_submit_enabled(False)

        self.dispatcher.submit(
            lambda: self.pipeline.submit(form),
            lambda ack: self._on_submit_success(generation, form, ack),
            lambda err: self._on_submit_failure(generation, err),
        )
        return True

    def _on_submit_success(self, generation: int, form: EditForm, ack: Any) -> None:
        self.notifier.show_message(NOTICE_SUCCESS)

        draft = GalleryEntryDraft(
            id=self.gallery.next_id(),
            url=form.source_path.resolve().as_uri(),
            description=form.description,
            likes=0,
            comments=(),
            effect=form.effect,
        )
        self.gallery.append_entry(draft)
        logger.info("Published photo #%s", draft.id)

        if generation == self._generation:
            self._teardown()

    def _on_submit_failure(self, generation: int, err: BaseException) -> None:
        if not isinstance(err, TransportError):
            logger.error("Unexpected submission failure", exc_info=err)
            err = TransportError(str(err) or err.__class__.__name__)
        logger.warning("Submission failed: %s", err)
        self.last_error = err

        self.notifier.show_message(NOTICE_ERROR)
        if generation != self._generation:
            return
        self.session.submitting = False
        self.view.set_submit_enabled(True)
