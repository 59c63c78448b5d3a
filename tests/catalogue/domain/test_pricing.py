"""Tests for price variants and the single price resolution rule."""

import pytest
from catalogue.item.pricing import (
    Per100g,
    PerPiece,
    PerUnit,
    display_amount,
    order_unit_price,
    resolve_price,
)
from shared.exceptions import ValidationError


class TestResolvePrice:
    def test_tagged_mapping(self):
        assert resolve_price({"unit": "per100gm", "amount": 12}) == Per100g(amount=12)

    def test_variant_instance_passes_through(self):
        price = PerUnit(amount=40)
        assert resolve_price(price) is price

    @pytest.mark.parametrize(
        "tiers, expected",
        [
            ({"perPiece": 50, "perUnit": 40, "per100gm": 12}, PerPiece(amount=50)),
            ({"perUnit": 40, "per100gm": 12}, PerUnit(amount=40)),
            ({"per100gm": 12}, Per100g(amount=12)),
            ({"perPiece": None, "per100gm": 12}, Per100g(amount=12)),
        ],
    )
    def test_legacy_tier_precedence(self, tiers, expected):
        assert resolve_price(tiers) == expected

    def test_zero_is_a_price(self):
        assert resolve_price({"perPiece": 0}) == PerPiece(amount=0)

    @pytest.mark.parametrize("raw", [None, {}])
    def test_no_price(self, raw):
        assert resolve_price(raw) is None

    @pytest.mark.parametrize(
        "raw",
        [
            {"perPiece": -1},
            {"unit": "perPiece", "amount": -5},
            {"unit": "perKilo", "amount": 5},
            {"perPiece": "fifty"},
            50,
        ],
    )
    def test_invalid_prices_rejected(self, raw):
        with pytest.raises(ValidationError):
            resolve_price(raw)


class TestPriceUses:
    def test_display_amount_uses_any_unit(self):
        assert display_amount({"per100gm": 12}) == 12
        assert display_amount(None) is None

    def test_only_per_piece_is_billable(self):
        assert order_unit_price({"perPiece": 50, "per100gm": 12}) == 50
        assert order_unit_price({"unit": "perUnit", "amount": 40}) is None
        assert order_unit_price(None) is None
