import unittest

from member_lookup.formatting import CURRENT, OVERDUE, format_currency, format_date, overdue_status, read_amount
from member_lookup.parser import parse_csv_text
from member_lookup.presentation import member_card


class FormatDateTests(unittest.TestCase):
    def test_eight_digits_become_month_day_year(self):
        self.assertEqual(format_date("20240615"), "06/15/2024")

    def test_separators_are_ignored(self):
        self.assertEqual(format_date("2024-06-15"), "06/15/2024")
        self.assertEqual(format_date("2024/06/15"), "06/15/2024")

    def test_missing_values(self):
        for raw in ("N/A", "", "   ", None):
            with self.subTest(raw=raw):
                self.assertEqual(format_date(raw), "N/A")

    def test_other_shapes_are_returned_untouched(self):
        for raw in ("June 2024", "2024/6/15", "15/06/24", "202406150"):
            with self.subTest(raw=raw):
                self.assertEqual(format_date(raw), raw)


class FormatCurrencyTests(unittest.TestCase):
    def test_grouping_and_two_decimals(self):
        self.assertEqual(format_currency("1234.5"), "₱1,234.50")
        self.assertEqual(format_currency("1000000"), "₱1,000,000.00")
        self.assertEqual(format_currency(42), "₱42.00")

    def test_unreadable_values_are_zero(self):
        for raw in ("abc", "", "N/A", None, "-", "."):
            with self.subTest(raw=raw):
                self.assertEqual(format_currency(raw), "₱0.00")

    def test_noise_is_stripped(self):
        self.assertEqual(format_currency("₱1,500.00"), "₱1,500.00")
        self.assertEqual(format_currency("PHP 2,000"), "₱2,000.00")

    def test_leading_number_wins(self):
        self.assertEqual(format_currency("1.2.3"), "₱1.20")

    def test_negative_amounts(self):
        self.assertEqual(format_currency("-250"), "₱-250.00")
        self.assertEqual(format_currency("-1234.5"), "₱-1,234.50")

    def test_negative_zero_renders_as_zero(self):
        self.assertEqual(format_currency("-0"), "₱0.00")
        self.assertEqual(format_currency("-0.001"), "₱0.00")

    def test_half_up_rounding(self):
        self.assertEqual(format_currency("0.125"), "₱0.13")
        self.assertEqual(format_currency("2.5"), "₱2.50")

    def test_amounts_wider_than_default_decimal_precision(self):
        self.assertRegex(format_currency("1" * 29), r"^₱[0-9]{2}(,[0-9]{3}){9}\.00$")
        self.assertRegex(format_currency("123456789012345678901234567890"), r"^₱[0-9]{3}(,[0-9]{3}){9}\.00$")
        self.assertRegex(format_currency("9" * 40), r"^₱[0-9]{1,3}(,[0-9]{3})+\.00$")
        self.assertRegex(format_currency("-" + "9" * 40), r"^₱-[0-9]{1,3}(,[0-9]{3})+\.00$")

    def test_huge_overdue_cell_still_renders_a_card(self):
        record = parse_csv_text("Name,ID,Overdue\nJane,1," + "9" * 40).records[0]
        card = member_card(record)
        self.assertEqual(card["status"], OVERDUE)
        self.assertTrue(card["overdue_amount"].endswith(".00"))

    def test_custom_symbol(self):
        self.assertEqual(format_currency("12", symbol="$"), "$12.00")

    def test_infinity(self):
        self.assertEqual(format_currency(float("inf")), "₱∞")


class ReadAmountTests(unittest.TestCase):
    def test_reads_leading_number(self):
        self.assertEqual(read_amount("(12) PHP"), 12.0)
        self.assertEqual(read_amount(".5"), 0.5)
        self.assertIsNone(read_amount("abc"))
        self.assertIsNone(read_amount(float("nan")))


class OverdueStatusTests(unittest.TestCase):
    def test_positive_overdue_is_flagged(self):
        self.assertEqual(overdue_status("120.00"), OVERDUE)
        self.assertEqual(overdue_status("₱0.01"), OVERDUE)

    def test_zero_negative_and_unreadable_are_current(self):
        for raw in ("0.00", "0", "-5", "abc", "N/A", None):
            with self.subTest(raw=raw):
                self.assertEqual(overdue_status(raw), CURRENT)


if __name__ == "__main__":
    unittest.main()
