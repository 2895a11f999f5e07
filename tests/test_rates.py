import logging

import pytest

from conftest import make_appliance
from powerpredict.enums import EfficiencyRating, HomeSize, Season
from powerpredict.models import BillSettings
from powerpredict.rates import (
    BASELINE_RATE,
    REGION_RATES,
    effective_rate,
    region_rate,
    settings_multiplier,
    time_of_use_multiplier,
)


def test_known_region_rate():
    assert region_rate("Pacific") == REGION_RATES["Pacific"]


def test_unknown_region_uses_baseline(caplog):
    with caplog.at_level(logging.WARNING, logger="powerpredict.rates"):
        assert region_rate("Atlantis") == BASELINE_RATE
    assert "Atlantis" in caplog.text


def test_default_settings_multiplier():
    assert settings_multiplier(BillSettings()) == pytest.approx(1.15)


def test_combined_multiplier():
    settings = BillSettings(
        season=Season.WINTER,
        home_size=HomeSize.LARGE,
        efficiency_rating=EfficiencyRating.POOR,
    )
    assert settings_multiplier(settings) == pytest.approx(1.10 * 1.15 * 1.20)


def test_time_of_use_only_when_enabled():
    assert time_of_use_multiplier("Heating & Cooling", BillSettings()) == 1.0
    tou = BillSettings(use_time_of_use=True)
    assert time_of_use_multiplier("Heating & Cooling", tou) == 1.25
    assert time_of_use_multiplier("Laundry", tou) == 0.85
    assert time_of_use_multiplier("Garage", tou) == 1.0


def test_effective_rate_default():
    assert effective_rate(make_appliance(), BillSettings()) == (
        pytest.approx(0.184)
    )


def test_excellent_efficiency_lowers_rate():
    poor = BillSettings(efficiency_rating=EfficiencyRating.POOR)
    excellent = BillSettings(efficiency_rating=EfficiencyRating.EXCELLENT)
    fridge = make_appliance()
    assert effective_rate(fridge, excellent) < effective_rate(fridge, poor)


def test_override_rate_ignores_settings():
    settings = BillSettings(region="Hawaii", use_time_of_use=True)
    fridge = make_appliance(cost_per_kwh=0.07)
    assert effective_rate(fridge, settings) == 0.07
