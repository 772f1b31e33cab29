"""
Модульные тесты прогноза веса.

Покрывает:
- linear_slope: МНК по порядковым номерам замеров
- classify_trend: порог стабильности 0.1 кг в неделю
- build_forecast: недостаточно данных, недельный и месячный тренд, сообщение
"""

import pytest

from fitbody.services.forecast_service import (
    build_forecast,
    classify_trend,
    linear_slope,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# linear_slope
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("weights", [[], [70.0]])
def test_slope_requires_two_samples(weights):
    assert linear_slope(weights) is None


def test_slope_two_points():
    assert linear_slope([70, 72]) == pytest.approx(2.0)


def test_slope_flat_series_is_zero():
    assert linear_slope([80, 80, 80, 80]) == pytest.approx(0.0)


def test_slope_noisy_series():
    """x = 0..3, y = 80, 79, 79, 78 -> наклон -0.6."""
    assert linear_slope([80, 79, 79, 78]) == pytest.approx(-0.6)


# ---------------------------------------------------------------------------
# classify_trend
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("weekly,expected", [
    (0.0, "stable"),
    (0.09, "stable"),
    (-0.09, "stable"),
    (0.1, "gaining"),
    (1.5, "gaining"),
    (-0.1, "losing"),
    (-2.0, "losing"),
])
def test_classify_trend(weekly, expected):
    assert classify_trend(weekly) == expected


# ---------------------------------------------------------------------------
# build_forecast
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("weights", [[], [72.5]])
def test_forecast_insufficient_data(weights):
    assert build_forecast(weights) is None


def test_forecast_two_samples():
    forecast = build_forecast([70, 72])

    assert forecast.slope == pytest.approx(2.0)
    assert forecast.weekly_change == 14.0
    assert forecast.monthly_change == 60.0
    assert forecast.direction == "gaining"
    assert forecast.magnitude == 60.0
    assert forecast.current_weight == 72
    assert forecast.data_points == 2
    assert forecast.message == "At this rate, you'll gain 60.0kg in 1 month"


def test_forecast_losing():
    forecast = build_forecast([80, 79, 79, 78])

    assert forecast.direction == "losing"
    assert forecast.weekly_change == pytest.approx(-4.2)
    assert forecast.monthly_change == pytest.approx(-18.0)
    assert forecast.magnitude == pytest.approx(18.0)
    assert "lose 18.0kg" in forecast.message


def test_forecast_stable():
    forecast = build_forecast([75.0, 75.01, 75.0, 75.01])

    assert forecast.direction == "stable"
    assert forecast.message == "Your weight is staying stable"
    assert forecast.current_weight == 75.01
