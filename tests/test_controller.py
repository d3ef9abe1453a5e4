import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

from PIL import Image

from tests._test_path import SRC  # noqa: F401

from photopost.app.controller import MODAL_OWNER, NOTICE_ERROR, NOTICE_SUCCESS, EditSessionController
from photopost.app.errors import ConfigurationError, ResourceError, TransportError
from photopost.app.preview import PreviewHandle
from photopost.app.state import ModalMarker
from photopost.validation.report import FIELD_HASHTAGS

ESC = SimpleNamespace(keysym="Escape")


class FakeView:
    """Records what the controller asked the overlay to do."""

    def __init__(self):
        self.visible = False
        self.submit_enabled = True
        self.renders = []
        self.validation = None
        self.fields = ("", "", "none")
        self.key_callback = None
        self.typing = False

    def show_overlay(self):
        self.visible = True

    def hide_overlay(self):
        self.visible = False

    def render(self, state):
        self.renders.append(state)

    def set_submit_enabled(self, enabled):
        self.submit_enabled = enabled

    def show_validation(self, report):
        self.validation = report

    def reset_fields(self, hashtags, description, effect):
        self.fields = (hashtags, description, effect)

    def bind_keys(self, callback):
        self.key_callback = callback

    def unbind_keys(self):
        self.key_callback = None

    def is_typing(self):
        return self.typing

    @property
    def last(self):
        return self.renders[-1]


class ManualDispatcher:
    """Holds submitted work until the test resolves it."""

    def __init__(self):
        self.jobs = []

    def submit(self, work, on_success, on_failure):
        self.jobs.append((work, on_success, on_failure))

    def run_next(self):
        work, on_success, on_failure = self.jobs.pop(0)
        try:
            result = work()
        except Exception as e:
            on_failure(e)
        else:
            on_success(result)


class FakeGallery:
    def __init__(self, existing=25):
        self.entries = []
        self.existing = existing

    def next_id(self):
        return self.existing + len(self.entries) + 1

    def append_entry(self, draft):
        self.entries.append(draft)


class TestEditSessionController(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory(prefix="photopost_ctl_")
        self.dir = Path(self._tmp.name)
        self.image_path = self.dir / "cat.png"
        Image.new("RGB", (40, 30), (120, 80, 40)).save(self.image_path)

        self.view = FakeView()
        self.pipeline = Mock()
        self.pipeline.submit.return_value = {"ok": True}
        self.gallery = FakeGallery()
        self.notifier = Mock()
        self.modal = ModalMarker()
        self.dispatcher = ManualDispatcher()
        self.handles = []

        def loader(path):
            h = PreviewHandle.open(path)
            self.handles.append(h)
            return h

        self.ctl = EditSessionController(
            view=self.view,
            pipeline=self.pipeline,
            gallery=self.gallery,
            notifier=self.notifier,
            modal=self.modal,
            dispatcher=self.dispatcher,
            preview_loader=loader,
        )

    def tearDown(self):
        self._tmp.cleanup()

    def _assert_closed_with_defaults(self):
        s = self.ctl.session
        self.assertFalse(s.is_open)
        self.assertFalse(self.view.visible)
        self.assertFalse(self.modal.active)
        self.assertIsNone(self.view.key_callback)
        self.assertTrue(self.view.submit_enabled)
        self.assertEqual(self.view.fields, ("", "", "none"))
        self.assertEqual((s.effect, s.intensity, s.scale_percent), ("none", 100, 100))
        self.assertIsNone(s.preview)
        for h in self.handles:
            self.assertEqual(h.release_count, 1)

    # ---------- construction ----------

    def test_missing_collaborator_is_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            EditSessionController(self.view, self.pipeline, None, self.notifier, self.modal, self.dispatcher)

    # ---------- open ----------

    def test_open_initializes_session(self):
        self.assertTrue(self.ctl.open(self.image_path))
        s = self.ctl.session
        self.assertTrue(s.is_open)
        self.assertTrue(self.view.visible)
        self.assertTrue(self.modal.active)
        self.assertEqual(self.modal.owners, [MODAL_OWNER])
        self.assertIsNotNone(self.view.key_callback)
        self.assertEqual(self.view.last.effect, "none")
        self.assertEqual(self.view.last.scale_percent, 100)
        self.assertFalse(self.view.last.intensity_visible)
        self.assertIsNotNone(self.view.last.image)

    def test_open_failure_keeps_closed(self):
        self.ctl.preview_loader = Mock(side_effect=ResourceError("broken"))
        self.assertFalse(self.ctl.open(self.dir / "broken.jpg"))
        self.assertFalse(self.ctl.session.is_open)
        self.assertFalse(self.view.visible)
        self.assertFalse(self.modal.active)
        self.notifier.show_message.assert_called_once()
        self.assertEqual(self.notifier.show_message.call_args[0][0], NOTICE_ERROR)

    def test_new_selection_releases_previous_preview_once(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("heat")
        self.ctl.open(self.image_path)
        self.assertEqual(len(self.handles), 2)
        self.assertEqual(self.handles[0].release_count, 1)
        self.assertFalse(self.handles[1].released)
        self.assertEqual(self.ctl.session.effect, "heat")
        self.ctl.close()
        self.assertEqual(self.handles[1].release_count, 1)
        self.assertEqual(self.handles[0].release_count, 1)

    # ---------- preview controls ----------

    def test_sepia_then_intensity_60(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("sepia")
        self.assertTrue(self.view.last.intensity_visible)
        self.ctl.set_intensity(60)
        state = self.view.last
        self.assertEqual(state.transform.filter_css, "sepia(0.60)")
        self.assertEqual(state.transform.effect_class, "effects__preview--sepia")
        self.assertEqual(state.descriptor.preview_class_name, "effects__preview--sepia")

    def test_switch_to_none_hides_and_clears(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("marvin")
        self.ctl.set_intensity(30)
        self.ctl.select_effect("none")
        self.assertFalse(self.view.last.intensity_visible)
        self.assertEqual(self.view.last.transform.filter_css, "")
        # slider value survives and is reapplied when an effect is chosen again
        self.ctl.select_effect("chrome")
        self.assertEqual(self.view.last.transform.filter_css, "grayscale(0.30)")

    def test_every_interaction_renders_synchronously(self):
        self.ctl.open(self.image_path)
        n = len(self.view.renders)
        self.ctl.decrease_scale()
        self.ctl.select_effect("phobos")
        self.ctl.set_intensity(50)
        self.ctl.increase_scale()
        self.assertEqual(len(self.view.renders), n + 4)
        self.assertEqual(self.view.last.transform.scale_factor, 1.0)
        self.assertEqual(self.view.last.transform.filter_css, "blur(1.50px)")

    def test_scale_and_effect_are_independent(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("heat")
        self.ctl.set_intensity(50)
        self.ctl.decrease_scale()
        self.ctl.decrease_scale()
        state = self.view.last
        self.assertEqual(state.transform.scale_factor, 0.5)
        self.assertEqual(state.transform.filter_css, "brightness(2.00)")

    def test_scale_clamps(self):
        self.ctl.open(self.image_path)
        for _ in range(6):
            self.ctl.decrease_scale()
        self.assertEqual(self.view.last.scale_percent, 25)
        self.ctl.set_scale("not a number")
        self.assertEqual(self.view.last.scale_percent, 100)

    def test_unknown_effect_ignored(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("vintage")
        self.assertEqual(self.ctl.session.effect, "none")

    # ---------- close paths ----------

    def test_cancel_tears_down(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("sepia")
        self.ctl.set_hashtags("#sea")
        self.ctl.close()
        self._assert_closed_with_defaults()
        self.assertEqual(self.gallery.entries, [])

    def test_escape_closes_unless_typing(self):
        self.ctl.open(self.image_path)
        self.view.typing = True
        self.assertIsNone(self.view.key_callback(ESC))
        self.assertTrue(self.ctl.session.is_open)

        self.view.typing = False
        self.assertEqual(self.view.key_callback(SimpleNamespace(keysym="a")), None)
        self.assertTrue(self.ctl.session.is_open)
        self.assertEqual(self.view.key_callback(ESC), "break")
        self._assert_closed_with_defaults()

    def test_close_when_closed_is_noop(self):
        self.ctl.close()
        self.assertEqual(self.handles, [])
        self.assertFalse(self.modal.active)

    # ---------- validation ----------

    def test_invalid_fields_block_submission(self):
        self.ctl.open(self.image_path)
        self.ctl.set_hashtags("#a")
        self.assertFalse(self.ctl.submit())
        self.assertEqual(self.dispatcher.jobs, [])
        self.pipeline.submit.assert_not_called()
        self.assertTrue(self.ctl.session.is_open)
        self.assertFalse(self.view.validation.for_field(FIELD_HASHTAGS).valid)

    def test_live_revalidation_after_failed_submit(self):
        self.ctl.open(self.image_path)
        self.ctl.set_hashtags("#ab #AB")
        self.ctl.submit()
        self.assertFalse(self.view.validation.passed)
        self.ctl.set_hashtags("#ab #cd")
        self.assertTrue(self.view.validation.passed)
        self.assertFalse(self.ctl.session.errors_shown)

    # ---------- submission ----------

    def test_successful_submission(self):
        self.ctl.open(self.image_path)
        self.ctl.select_effect("sepia")
        self.ctl.set_intensity(60)
        self.ctl.decrease_scale()
        self.ctl.set_hashtags("#tag1 #tag2")
        self.ctl.set_description("A cat")

        self.assertTrue(self.ctl.submit())
        self.assertFalse(self.view.submit_enabled)
        self.assertTrue(self.ctl.session.submitting)

        self.dispatcher.run_next()

        form = self.pipeline.submit.call_args[0][0]
        self.assertEqual((form.effect, form.intensity, form.scale_percent), ("sepia", 60, 75))
        self.assertEqual(form.hashtags, "#tag1 #tag2")

        self.assertEqual(len(self.gallery.entries), 1)
        draft = self.gallery.entries[0]
        self.assertEqual(draft.id, 26)
        self.assertEqual(draft.description, "A cat")
        self.assertEqual(draft.likes, 0)
        self.assertEqual(draft.comments, ())
        self.assertEqual(draft.effect, "sepia")
        self.assertEqual(draft.url, self.image_path.resolve().as_uri())

        self.notifier.show_message.assert_called_once_with(NOTICE_SUCCESS)
        self._assert_closed_with_defaults()

    def test_failed_submission_keeps_state(self):
        self.pipeline.submit.side_effect = TransportError("Could not send the photo", 500)
        self.ctl.open(self.image_path)
        self.ctl.select_effect("heat")
        self.ctl.set_intensity(20)
        self.ctl.set_hashtags("#keep")
        self.ctl.set_description("keep me")

        self.ctl.submit()
        with self.assertLogs("photopost.app.controller", level="WARNING"):
            self.dispatcher.run_next()

        s = self.ctl.session
        self.assertTrue(s.is_open)
        self.assertTrue(self.view.visible)
        self.assertTrue(self.modal.active)
        self.assertTrue(self.view.submit_enabled)
        self.assertFalse(s.submitting)
        self.assertEqual((s.hashtags, s.description, s.effect, s.intensity), ("#keep", "keep me", "heat", 20))
        self.assertEqual(self.gallery.entries, [])
        self.notifier.show_message.assert_called_once_with(NOTICE_ERROR)
        self.assertEqual(self.ctl.last_error.status, 500)

        # retry works without re-entering anything
        self.pipeline.submit.side_effect = None
        self.assertTrue(self.ctl.submit())
        self.dispatcher.run_next()
        self.assertEqual(len(self.gallery.entries), 1)
        self._assert_closed_with_defaults()

    def test_unexpected_exception_becomes_transport_error(self):
        self.pipeline.submit.side_effect = RuntimeError("boom")
        self.ctl.open(self.image_path)
        self.ctl.submit()
        with self.assertLogs("photopost.app.controller", level="ERROR"):
            self.dispatcher.run_next()
        self.assertIsInstance(self.ctl.last_error, TransportError)
        self.assertTrue(self.ctl.session.is_open)

    def test_second_submit_while_in_flight_is_noop(self):
        self.ctl.open(self.image_path)
        self.assertTrue(self.ctl.submit())
        self.assertFalse(self.ctl.submit())
        self.assertEqual(len(self.dispatcher.jobs), 1)
        # editing text while the request is in flight is allowed
        self.ctl.set_description("typed meanwhile")
        self.assertEqual(self.ctl.session.description, "typed meanwhile")

    def test_submit_when_closed_is_noop(self):
        self.assertFalse(self.ctl.submit())
        self.assertEqual(self.dispatcher.jobs, [])

    def test_late_success_after_close_does_not_touch_new_session(self):
        self.ctl.open(self.image_path)
        self.ctl.submit()
        self.ctl.close()
        self.ctl.open(self.image_path)
        self.ctl.select_effect("chrome")

        self.dispatcher.run_next()

        self.assertEqual(len(self.gallery.entries), 1)
        self.assertTrue(self.ctl.session.is_open)
        self.assertEqual(self.ctl.session.effect, "chrome")
        self.assertEqual(self.handles[0].release_count, 1)
        self.assertFalse(self.handles[1].released)

    def test_overlapping_modal_keeps_marker(self):
        self.modal.acquire("full-view")
        self.ctl.open(self.image_path)
        self.ctl.close()
        self.assertTrue(self.modal.active)
        self.assertEqual(self.modal.owners, ["full-view"])
