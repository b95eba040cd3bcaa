import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from validator import is_valid_entry, parse_date, validate_entry, validate_fields


class ParseDateTestCase(unittest.TestCase):
    def test_iso(self) -> None:
        self.assertEqual(parse_date("2026-02-21"), datetime.date(2026, 2, 21))

    def test_us_short_year(self) -> None:
        self.assertEqual(parse_date("2/21/26"), datetime.date(2026, 2, 21))

    def test_us_long_year(self) -> None:
        self.assertEqual(parse_date(" 12/1/2025 "), datetime.date(2025, 12, 1))

    def test_rejects_other_formats(self) -> None:
        for value in ("bad-date", "21.02.2026", "2026/02/21", "20260221", "2026-2-21", "", "2/21"):
            self.assertIsNone(parse_date(value), value)

    def test_rejects_impossible_dates(self) -> None:
        self.assertIsNone(parse_date("2026-02-30"))
        self.assertIsNone(parse_date("13/1/2026"))


class ValidateEntryTestCase(unittest.TestCase):
    def test_valid_row(self) -> None:
        self.assertTrue(is_valid_entry("2/21/2026,Squat,185.0,8,4,Valid,true"))
        self.assertTrue(is_valid_entry("2026-02-21,Squat,0,0,0,,FALSE"))

    def test_too_few_fields(self) -> None:
        self.assertIn("expected 7 fields", validate_entry("2026-02-21,Squat,100,5,5,note"))

    def test_empty_entries(self) -> None:
        self.assertFalse(is_valid_entry(None))
        self.assertFalse(is_valid_entry("   "))

    def test_blank_exercise(self) -> None:
        self.assertEqual(validate_entry("2026-02-21,   ,100,5,5,,true"), "exercise name is empty")

    def test_negative_weight(self) -> None:
        self.assertEqual(
            validate_entry("2/21/2026,BadNegative,-10,8,3,Invalid,false"),
            "weight must be non-negative",
        )

    def test_non_numeric_values(self) -> None:
        self.assertFalse(is_valid_entry("2026-02-21,Squat,heavy,8,3,,true"))
        self.assertFalse(is_valid_entry("2026-02-21,Squat,nan,8,3,,true"))
        self.assertFalse(is_valid_entry("2026-02-21,Squat,100,8.5,3,,true"))
        self.assertFalse(is_valid_entry("2026-02-21,Squat,100,8,-1,,true"))

    def test_completed_literal(self) -> None:
        self.assertFalse(is_valid_entry("2026-02-21,Squat,100,8,3,,yes"))
        self.assertTrue(is_valid_entry("2026-02-21,Squat,100,8,3,, True "))

    def test_note_is_not_checked(self) -> None:
        self.assertIsNone(
            validate_fields(["2026-02-21", "Squat", "100", "8", "3", '"odd, note"', "true"])
        )

    def test_rejects_non_ascii_digits(self) -> None:
        arabic_date = "٢٠٢٦-٠١-٠١"
        self.assertFalse(is_valid_entry(f"{arabic_date},Squat,100,5,5,,true"))
        self.assertFalse(is_valid_entry("2026-01-01,Squat,١٠٠,5,5,,true"))
        self.assertFalse(is_valid_entry("2026-01-01,Squat,100,٥,5,,true"))
        self.assertIsNone(parse_date("٢/٢١/2026"))

    def test_non_text_entry(self) -> None:
        self.assertEqual(validate_entry(42), "entry is not text: int")

    def test_extra_fields_are_tolerated(self) -> None:
        self.assertTrue(is_valid_entry("2026-02-21,Squat,100,8,3,note,true,extra"))


if __name__ == "__main__":
    unittest.main()
