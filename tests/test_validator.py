import unittest

from tests._test_path import SRC  # noqa: F401

from photopost.validation import validator as v
from photopost.validation.report import FIELD_DESCRIPTION, FIELD_HASHTAGS


class TestHashtags(unittest.TestCase):
    def test_empty_is_valid(self):
        self.assertTrue(v.validate_hashtags("").valid)
        self.assertTrue(v.validate_hashtags("   ").valid)

    def test_two_valid_tags(self):
        r = v.validate_hashtags("#tag1 #tag2")
        self.assertTrue(r.valid)
        self.assertEqual(r.message, "")
        self.assertEqual(r.field, FIELD_HASHTAGS)

    def test_too_short(self):
        r = v.validate_hashtags("#a")
        self.assertFalse(r.valid)
        self.assertEqual(r.message, v.MSG_BAD_FORMAT)

    def test_case_insensitive_duplicate(self):
        r = v.validate_hashtags("#ab #AB")
        self.assertFalse(r.valid)
        self.assertEqual(r.message, v.MSG_DUPLICATE)

    def test_more_than_five(self):
        r = v.validate_hashtags("#one #two #three #four #five #six")
        self.assertFalse(r.valid)
        self.assertEqual(r.message, v.MSG_TOO_MANY)
        self.assertTrue(v.validate_hashtags("#one #two #three #four #five").valid)

    def test_pattern(self):
        self.assertTrue(v.validate_hashtags("#Котики #море2024").valid)
        self.assertTrue(v.validate_hashtags("#" + "a" * 19).valid)
        self.assertFalse(v.validate_hashtags("#" + "a" * 20).valid)
        self.assertFalse(v.validate_hashtags("tag").valid)
        self.assertFalse(v.validate_hashtags("#").valid)
        self.assertFalse(v.validate_hashtags("#with-dash").valid)
        self.assertFalse(v.validate_hashtags("#a#b").valid)

    def test_repeated_characters_inside_tag_allowed(self):
        self.assertTrue(v.validate_hashtags("#aaaa").valid)

    def test_extra_whitespace_between_tags(self):
        self.assertTrue(v.validate_hashtags("  #sea\t #sun  ").valid)


class TestDescription(unittest.TestCase):
    def test_boundary(self):
        self.assertTrue(v.validate_description("x" * 140).valid)
        r = v.validate_description("x" * 141)
        self.assertFalse(r.valid)
        self.assertEqual(r.field, FIELD_DESCRIPTION)
        self.assertEqual(r.message, v.MSG_DESCRIPTION_TOO_LONG)

    def test_no_trimming(self):
        self.assertFalse(v.validate_description(" " * 141).valid)

    def test_counts_utf16_units(self):
        self.assertTrue(v.validate_description("я" * 140).valid)
        self.assertEqual(v.description_length("\U0001F600"), 2)
        self.assertTrue(v.validate_description("\U0001F600" * 70).valid)
        self.assertFalse(v.validate_description("\U0001F600" * 71).valid)
        self.assertFalse(v.validate_description("x" * 139 + "\U0001F600").valid)


class TestValidateForm(unittest.TestCase):
    def test_aggregates(self):
        report = v.validate_form("#ok", "fine")
        self.assertTrue(report.passed)
        self.assertEqual(len(report.results), 2)

        report = v.validate_form("#a", "fine")
        self.assertFalse(report.passed)
        self.assertFalse(report.for_field(FIELD_HASHTAGS).valid)
        self.assertTrue(report.for_field(FIELD_DESCRIPTION).valid)

    def test_format_report_text(self):
        txt = v.format_report_text(v.validate_form("#a", "x" * 200))
        self.assertIn("Overall: FAIL", txt)
        self.assertIn("hashtags", txt)
        self.assertIn("description", txt)
