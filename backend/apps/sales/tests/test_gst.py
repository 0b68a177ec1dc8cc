from decimal import Decimal

from django.test import SimpleTestCase

from apps.sales.services.gst import (
    calculate_from_line_items,
    calculate_gst,
    determine_gst_type,
    format_currency,
    generate_gst_summary,
    get_available_rates,
    get_state_code,
    get_state_name,
    is_valid_rate,
    validate_gstin,
)

MAHARASHTRA = "27AAPFU0939F1ZV"
MAHARASHTRA_CLIENT = "27AAACB1234C1Z5"
KARNATAKA = "29AAACR5055K1Z5"


class GstinTests(SimpleTestCase):
    def test_validation(self):
        self.assertTrue(validate_gstin(MAHARASHTRA))
        self.assertTrue(validate_gstin(MAHARASHTRA.lower()))
        self.assertFalse(validate_gstin("27AAPFU0939F1Z"))
        self.assertFalse(validate_gstin("27AAPFU0939F1XV"))
        self.assertFalse(validate_gstin(None))

    def test_state(self):
        self.assertEqual(get_state_code(KARNATAKA), "29")
        self.assertIsNone(get_state_code("invalid"))
        self.assertEqual(get_state_name("27"), "Maharashtra")
        self.assertEqual(get_state_name("28"), "Unknown State")

    def test_gst_type(self):
        self.assertEqual(determine_gst_type(MAHARASHTRA, MAHARASHTRA_CLIENT), "CGST+SGST")
        self.assertEqual(determine_gst_type(MAHARASHTRA, KARNATAKA), "IGST")
        self.assertEqual(determine_gst_type(MAHARASHTRA, None), "IGST")
        self.assertEqual(determine_gst_type("", ""), "IGST")


class CalculationTests(SimpleTestCase):
    def test_intra_state_splits_rate(self):
        result = calculate_gst(10000, 18, MAHARASHTRA, MAHARASHTRA_CLIENT)
        self.assertEqual(result.gst_type, "CGST+SGST")
        self.assertEqual(result.cgst_percentage, Decimal("9"))
        self.assertEqual(result.cgst_amount, Decimal("900.00"))
        self.assertEqual(result.sgst_amount, Decimal("900.00"))
        self.assertEqual(result.igst_amount, Decimal("0"))
        self.assertEqual(result.total_gst_amount, Decimal("1800.00"))
        self.assertEqual(result.total_after_gst, Decimal("11800.00"))
        self.assertEqual(result.business_state, "27")

    def test_inter_state_uses_igst(self):
        result = calculate_gst("2500.50", 12, MAHARASHTRA, KARNATAKA)
        self.assertEqual(result.gst_type, "IGST")
        self.assertEqual(result.igst_amount, Decimal("300.06"))
        self.assertEqual(result.total_after_gst, Decimal("2800.56"))
        self.assertEqual(result.cgst_amount, Decimal("0"))

    def test_not_applicable(self):
        for result in (
            calculate_gst(1000, 0, MAHARASHTRA, KARNATAKA),
            calculate_gst(0, 18, MAHARASHTRA, KARNATAKA),
            calculate_gst(1000, 18, MAHARASHTRA, KARNATAKA, apply_gst=False),
        ):
            self.assertEqual(result.gst_type, "NONE")
            self.assertEqual(result.total_gst_amount, Decimal("0"))
            self.assertEqual(result.total_after_gst, result.subtotal)

    def test_rounding_is_half_up(self):
        result = calculate_gst("0.25", 18, MAHARASHTRA, KARNATAKA)
        self.assertEqual(result.igst_amount, Decimal("0.05"))

    def test_line_items(self):
        items = [{"quantity": 2, "unitPrice": "1,000"}, {"quantity": "1.5", "rate": 200}]
        result = calculate_from_line_items(items, 5, MAHARASHTRA, MAHARASHTRA_CLIENT)
        self.assertEqual(result.subtotal, Decimal("2300.0"))
        self.assertEqual(result.total_gst_amount, Decimal("115.00"))

    def test_to_dict_uses_camel_case(self):
        data = calculate_gst(100, 18, MAHARASHTRA, KARNATAKA).to_dict()
        self.assertEqual(data["gstType"], "IGST")
        self.assertEqual(data["totalGSTAmount"], 18.0)
        self.assertEqual(data["totalAfterGST"], 118.0)
        self.assertEqual(data["clientState"], "29")

    def test_invalid_amount(self):
        with self.assertRaises(ValueError):
            calculate_gst("abc", 18)


class FormattingTests(SimpleTestCase):
    def test_rates(self):
        self.assertTrue(is_valid_rate(18))
        self.assertTrue(is_valid_rate("28"))
        self.assertFalse(is_valid_rate(15))
        self.assertFalse(is_valid_rate("x"))
        self.assertEqual([rate["value"] for rate in get_available_rates()], [0, 5, 12, 18, 28])

    def test_indian_grouping(self):
        self.assertEqual(format_currency(123456.789), "₹1,23,456.79")
        self.assertEqual(format_currency(999), "₹999.00")
        self.assertEqual(format_currency(12345678), "₹1,23,45,678.00")
        self.assertEqual(format_currency(-1500), "-₹1,500.00")

    def test_summary(self):
        lines = generate_gst_summary(calculate_gst(10000, 18, MAHARASHTRA, MAHARASHTRA_CLIENT))
        self.assertEqual(lines, [
            "Subtotal: ₹10,000.00",
            "CGST (9%): ₹900.00",
            "SGST (9%): ₹900.00",
            "Total GST: ₹1,800.00",
            "Total Amount: ₹11,800.00",
        ])
