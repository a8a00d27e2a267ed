"""Tests for the built-in tariff and the rule-picking helpers."""

from types import SimpleNamespace

import pytest
from logistics.pricing.tariff import (
    DEFAULT_AIR_TIERS,
    DEFAULT_SEA_USD_PER_CBM,
    pick_air_rate_from_rules,
    pick_sea_rate_from_rules,
    tariff_air_rate,
)


def _air_rule(min_kg, max_kg, rate):
    return SimpleNamespace(min_weight_kg=min_kg, max_weight_kg=max_kg, rate_usd_per_kg=rate)


def _sea_rule(rate):
    return SimpleNamespace(flat_rate_usd_per_cbm=rate)


class TestTariff:
    @pytest.mark.parametrize(
        "weight, rate",
        [
            (0.5, 13.5),
            (1, 13.5),
            (100, 13.5),
            (100.5, 13.5),
            (101, 11.5),
            (110.5, 11.5),
            (300, 11.5),
            (320, 10.8),
            (600, 10.8),
            (601, 10.5),
            (1000, 10.5),
            (1001, 10.0),
            (1500, 10.0),
            (1501, 9.8),
            (25000, 9.8),
        ],
    )
    def test_air_tiers(self, weight, rate):
        assert tariff_air_rate(weight) == rate

    def test_six_published_tiers(self):
        assert len(DEFAULT_AIR_TIERS) == 6
        assert DEFAULT_AIR_TIERS[-1].max_kg is None

    def test_sea_rate(self):
        assert DEFAULT_SEA_USD_PER_CBM == 550


class TestPickAirRate:
    def test_highest_minimum_wins_across_overlapping_bands(self):
        rules = [
            _air_rule(None, None, 14.0),
            _air_rule(100, 500, 11.0),
            _air_rule(300, 400, 10.8),
        ]
        assert pick_air_rate_from_rules(320, rules) == 10.8

    def test_band_bounds_are_inclusive(self):
        rules = [_air_rule(50, 100, 12.0)]
        assert pick_air_rate_from_rules(50, rules) == 12.0
        assert pick_air_rate_from_rules(100, rules) == 12.0

    def test_weight_outside_every_band(self):
        rules = [_air_rule(50, 100, 12.0)]
        assert pick_air_rate_from_rules(101, rules) is None

    def test_rules_without_rate_ignored(self):
        rules = [_air_rule(300, None, None), _air_rule(1, None, 12.5)]
        assert pick_air_rate_from_rules(320, rules) == 12.5

    def test_open_lower_bound_ranks_last(self):
        rules = [_air_rule(None, 1000, 13.0), _air_rule(0, 1000, 12.0)]
        assert pick_air_rate_from_rules(10, rules) == 12.0

    def test_no_rules(self):
        assert pick_air_rate_from_rules(10, []) is None


class TestPickSeaRate:
    def test_first_positive_rate_wins(self):
        assert pick_sea_rate_from_rules([_sea_rule(None), _sea_rule(0), _sea_rule(480), _sea_rule(500)]) == 480

    def test_no_positive_rate(self):
        assert pick_sea_rate_from_rules([_sea_rule(None), _sea_rule(0)]) is None
