import unittest
from pathlib import Path
from unittest.mock import Mock

from tests._test_path import SRC  # noqa: F401

from photopost.app.state import EditSession, ModalMarker
from photopost.core.models import EditForm


class TestEditSession(unittest.TestCase):
    def test_reset_clears_fields_and_restores_defaults(self):
        s = EditSession()
        s.source_path = Path("/tmp/x.jpg")
        s.preview = object()  # type: ignore[assignment]
        s.effect = "heat"
        s.intensity = 30
        s.scale.set_value(50)
        s.hashtags = "#sea"
        s.description = "text"
        s.is_open = True
        s.submitting = True
        s.errors_shown = True

        s.reset()

        self.assertIsNone(s.source_path)
        self.assertIsNone(s.preview)
        self.assertEqual(s.effect, "none")
        self.assertEqual(s.intensity, 100)
        self.assertEqual(s.scale_percent, 100)
        self.assertEqual(s.hashtags, "")
        self.assertEqual(s.description, "")
        self.assertFalse(s.is_open)
        self.assertFalse(s.submitting)
        self.assertFalse(s.errors_shown)

    def test_default_effect(self):
        s = EditSession(default_effect="chrome")
        self.assertEqual(s.effect, "chrome")
        s.effect = "none"
        s.reset()
        self.assertEqual(s.effect, "chrome")

    def test_snapshot_none_hides_intensity(self):
        s = EditSession()
        snap = s.snapshot()
        self.assertFalse(snap.intensity_visible)
        self.assertEqual(snap.transform.filter_css, "")
        self.assertEqual(snap.transform.effect_class, "")
        self.assertEqual(snap.transform.scale_factor, 1.0)
        self.assertIsNone(snap.image)

    def test_snapshot_combines_effect_and_scale(self):
        s = EditSession()
        s.effect = "sepia"
        s.intensity = 60
        s.scale.decrease()
        snap = s.snapshot()
        self.assertTrue(snap.intensity_visible)
        self.assertEqual(snap.transform.filter_css, "sepia(0.60)")
        self.assertEqual(snap.transform.effect_class, "effects__preview--sepia")
        self.assertEqual(snap.transform.scale_factor, 0.75)
        self.assertEqual(snap.scale_percent, 75)

    def test_to_form(self):
        s = EditSession()
        with self.assertRaises(ValueError):
            s.to_form()
        s.source_path = Path("/tmp/x.jpg")
        s.hashtags = "#a1"
        s.effect = "marvin"
        s.intensity = 10
        self.assertEqual(
            s.to_form(),
            EditForm(Path("/tmp/x.jpg"), "#a1", "", "marvin", 10, 100),
        )


class TestModalMarker(unittest.TestCase):
    def test_acquire_release(self):
        m = ModalMarker()
        cb = Mock()
        m.subscribe(cb)
        self.assertFalse(m.active)
        m.acquire("edit")
        self.assertTrue(m.active)
        m.acquire("edit")
        m.release("edit")
        self.assertFalse(m.active)
        self.assertEqual([c.args for c in cb.call_args_list], [(True,), (False,)])

    def test_overlapping_modals_keep_flag(self):
        m = ModalMarker()
        m.acquire("edit")
        m.acquire("full-view")
        m.release("edit")
        self.assertTrue(m.active)
        self.assertEqual(m.owners, ["full-view"])
        m.release("full-view")
        self.assertFalse(m.active)

    def test_release_unknown_owner_is_noop(self):
        m = ModalMarker()
        m.acquire("edit")
        m.release("toast")
        self.assertTrue(m.active)
