from __future__ import annotations

import logging
import mimetypes
from typing import Any, Dict, Tuple

from photopost.app.errors import TransportError
from photopost.core.models import EFFECT_NONE, EditForm

logger = logging.getLogger(__name__)

# Field names of the upload form, as the service expects them.
FIELD_FILE = "filename"
FIELD_SCALE = "scale"
FIELD_EFFECT = "effect"
FIELD_EFFECT_LEVEL = "effect-level"
FIELD_HASHTAGS = "hashtags"
FIELD_DESCRIPTION = "description"


def build_payload(form: EditForm) -> Tuple[Dict[str, str], Dict[str, Tuple[str, bytes, str]]]:
    """
    Turn a form snapshot into (fields, files) for a multipart POST.

    Raises OSError if the source file cannot be read.
    """
    fields = {
        FIELD_SCALE: f"{form.scale_percent}%",
        FIELD_EFFECT: form.effect,
        FIELD_EFFECT_LEVEL: "" if form.effect == EFFECT_NONE else str(form.intensity),
        FIELD_HASHTAGS: form.hashtags,
        FIELD_DESCRIPTION: form.description,
    }
    mime = mimetypes.guess_type(form.source_path.name)[0] or "application/octet-stream"
    content = form.source_path.read_bytes()
    files = {FIELD_FILE: (form.source_path.name, content, mime)}
    return fields, files


class SubmissionPipeline:
    """Packages an EditForm and hands it to the transport. Never touches the UI."""

    def __init__(self, api):
        self.api = api

    def submit(self, form: EditForm) -> Any:
        try:
            fields, files = build_payload(form)
        except OSError as e:
            raise TransportError(f"Could not read {form.source_path.name}: {e}") from e

        logger.info("Submitting %s (effect=%s, scale=%s)", form.source_path.name, form.effect, fields[FIELD_SCALE])
        ack = self.api.send_data(fields, files)
        logger.info("Submission of %s accepted", form.source_path.name)
        return ack
