# tests/test_unit_parser.py

"""Tests for size-string parsing into normalised units."""

import unittest

from grocery_prices.errors import ConversionError
from grocery_prices.filters.unit_parser import normalise_unit, parse_str_unit
from grocery_prices.models.product import Unit


class TestParseStrUnit(unittest.TestCase):
    """parse_str_unit behaviour per unit family."""

    def test_grams(self) -> None:
        """g, kg and mg normalise to grams."""
        self.assertEqual(parse_str_unit("150g"), (150.0, Unit.GRAMS))
        self.assertEqual(parse_str_unit("1kg"), (1000.0, Unit.GRAMS))
        quantity, unit = parse_str_unit("50mg")
        self.assertAlmostEqual(quantity, 0.05)
        self.assertEqual(unit, Unit.GRAMS)

    def test_millilitre(self) -> None:
        """ml and l normalise to millilitres."""
        self.assertEqual(parse_str_unit("10ml"), (10.0, Unit.MILLILITRE))
        self.assertEqual(parse_str_unit("1l"), (1000.0, Unit.MILLILITRE))

    def test_centimetre(self) -> None:
        """cm, m and metre normalise to centimetres."""
        self.assertEqual(parse_str_unit("10cm"), (10.0, Unit.CENTIMETRE))
        self.assertEqual(parse_str_unit("1m"), (100.0, Unit.CENTIMETRE))
        self.assertEqual(
            parse_str_unit("1 metre"), (100.0, Unit.CENTIMETRE)
        )

    def test_each_words(self) -> None:
        """Every 'each' synonym maps to a factor of one."""
        for word in (
            "ea", "each", "pk", "pack", "bunch", "sheets", "sachets",
            "capsules", "ss", "set", "pair", "pairs", "piece",
            "tablets", "rolls",
        ):
            with self.subTest(word=word):
                self.assertEqual(
                    parse_str_unit(f"10 {word}"), (10.0, Unit.EACH)
                )

    def test_pack_and_dozen(self) -> None:
        """'10 pack' is ten, '2 dozen' is twenty-four."""
        self.assertEqual(parse_str_unit("10 pack"), (10.0, Unit.EACH))
        self.assertEqual(parse_str_unit("10pk"), (10.0, Unit.EACH))
        self.assertEqual(parse_str_unit("2 dozen"), (24.0, Unit.EACH))

    def test_case_insensitive(self) -> None:
        """Upper-case input such as '100G' is accepted."""
        self.assertEqual(parse_str_unit("100G"), (100.0, Unit.GRAMS))

    def test_first_match_wins(self) -> None:
        """Only the first number+unit run is considered."""
        self.assertEqual(
            parse_str_unit("500g value pack 2kg"), (500.0, Unit.GRAMS)
        )

    def test_decimal_quantity(self) -> None:
        """Decimal sizes keep their fractional part."""
        self.assertEqual(parse_str_unit("1.5kg"), (1500.0, Unit.GRAMS))

    def test_no_pattern_fails(self) -> None:
        """Text without a number+unit pattern is rejected."""
        with self.assertRaises(ConversionError):
            parse_str_unit("unknown-text")

    def test_unknown_unit_fails(self) -> None:
        """A recognised pattern with an unknown unit is rejected."""
        with self.assertRaises(ConversionError):
            parse_str_unit("8x70g")


class TestNormaliseUnit(unittest.TestCase):
    """normalise_unit token table."""

    def test_known_token(self) -> None:
        """kg maps to a factor of 1000 grams."""
        self.assertEqual(normalise_unit("kg"), (1000.0, Unit.GRAMS))

    def test_unknown_token_message(self) -> None:
        """Unknown tokens name the offending unit."""
        with self.assertRaises(ConversionError) as ctx:
            normalise_unit("oz")
        self.assertIn("unknown unit: oz", str(ctx.exception))
