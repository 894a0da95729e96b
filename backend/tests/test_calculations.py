import numpy as np
import pytest

from app.schemas.indicators import ADTrend, OBVTrend, VPTTrend
from app.services.base import InsufficientDataError
from app.services.indicators import calculations as calc

from conftest import make_arrays


MIXED_CLOSES = np.array(
    [100, 101, 101, 99, 98, 102, 104, 104, 103, 105, 107, 106, 106, 108, 110, 109, 111, 111, 108, 112],
    dtype=float,
)
MIXED_VOLUMES = np.array(
    [1200, 900, 1500, 800, 1100, 2000, 1700, 600, 900, 1300, 1400, 700, 1000, 1600, 1800, 500, 1250, 950, 1050, 2200],
    dtype=float,
)


# =============================================================================
# WINDOW HELPERS
# =============================================================================


def test_relative_change_zero_baseline_is_zero():
    assert calc.relative_change(5.0, 0.0) == 0.0


def test_relative_change_negative_baseline_keeps_direction():
    # -100 -> -50 is an increase
    assert calc.relative_change(-50.0, -100.0) == pytest.approx(0.5)


def test_window_mean_uses_index_range():
    values = np.arange(20, dtype=float)
    assert calc.window_mean(values, -10) == pytest.approx(14.5)
    assert calc.window_mean(values, -20, -10) == pytest.approx(4.5)
    assert calc.window_mean(values, 5, 5) == 0.0


# =============================================================================
# OBV
# =============================================================================


def test_obv_moves_with_price_direction():
    values = calc.obv(MIXED_CLOSES, MIXED_VOLUMES)

    assert values[0] == MIXED_VOLUMES[0]
    assert np.array_equal(np.sign(np.diff(values)), np.sign(np.diff(MIXED_CLOSES)))


def test_obv_trend_rising_on_rising_series(rising_closes):
    data = make_arrays(rising_closes)
    values = calc.obv(data.closes, data.volumes)

    assert calc.obv_trend(values) == OBVTrend.RISING


def test_obv_trend_with_negative_baseline():
    values = np.array([-100.0] * 10 + [-50.0] * 10)
    assert calc.obv_trend(values) == OBVTrend.RISING


def test_obv_trend_requires_20_points():
    with pytest.raises(InsufficientDataError) as exc:
        calc.obv_trend(np.ones(19))
    assert exc.value.required == 20
    assert exc.value.actual == 19


def test_obv_divergence_is_bullish_only():
    falling_price = np.linspace(100, 95, 20)
    rising_obv = np.linspace(1000, 1100, 20)

    assert calc.obv_divergence(falling_price, rising_obv) is True
    # Price up while OBV down is not reported
    assert calc.obv_divergence(falling_price[::-1], rising_obv[::-1]) is False


# =============================================================================
# AD LINE / VPT
# =============================================================================


def test_clv_flat_bar_is_zero():
    clv = calc.close_location_value(np.array([10.0]), np.array([10.0]), np.array([10.0]))
    assert clv[0] == 0.0


def test_ad_line_is_cumulative():
    data = make_arrays(MIXED_CLOSES, MIXED_VOLUMES)
    clv = calc.close_location_value(data.highs, data.lows, data.closes)
    ad = calc.ad_line(data.highs, data.lows, data.closes, data.volumes)

    assert ad[0] == pytest.approx(clv[0] * data.volumes[0])
    for i in range(1, len(ad)):
        assert ad[i] == pytest.approx(ad[i - 1] + clv[i] * data.volumes[i])


def test_ad_trend_on_rising_series(rising_closes):
    data = make_arrays(rising_closes)
    ad = calc.ad_line(data.highs, data.lows, data.closes, data.volumes)
    trend, strength = calc.ad_trend(ad)

    assert trend == ADTrend.ACCUMULATION
    assert strength > 3


def test_vpt_trend_sign():
    rising = calc.vpt(np.array([100.0, 101, 102, 103, 104, 105]), np.full(6, 1000.0))
    flat = calc.vpt(np.full(6, 100.0), np.full(6, 1000.0))

    assert rising[0] == 0.0
    assert calc.vpt_trend(rising) == VPTTrend.POSITIVE
    assert calc.vpt_trend(flat) == VPTTrend.NEUTRAL
    assert calc.vpt_trend(-rising) == VPTTrend.NEGATIVE


# =============================================================================
# RSI / SMA / VOLATILITY
# =============================================================================


def test_rsi_bounds():
    values = calc.rsi(MIXED_CLOSES)
    defined = values[~np.isnan(values)]

    assert len(defined) == len(MIXED_CLOSES) - 14
    assert np.all((defined >= 0) & (defined <= 100))


def test_rsi_extremes(rising_closes):
    assert calc.latest_rsi(np.array(rising_closes)) == 100.0
    assert calc.latest_rsi(np.array(rising_closes[::-1])) == 0.0


def test_rsi_forgets_losses_outside_window():
    falling = [130.0 - i for i in range(15)]
    rebound = [falling[-1] + i for i in range(1, 16)]
    rally = [100.0 + i for i in range(15)]
    selloff = [rally[-1] - i for i in range(1, 16)]

    # the last 14 deltas are all gains / all losses
    assert calc.latest_rsi(np.array(falling + rebound)) == 100.0
    assert calc.latest_rsi(np.array(rally + selloff)) == 0.0


def test_rsi_uses_last_fourteen_deltas():
    # 13 gains of 1 then a loss of 1 inside the window: 13 / (13 + 1)
    closes = np.array([200.0] + [100.0 + i for i in range(14)] + [112.0])

    assert calc.latest_rsi(closes) == pytest.approx(100 - 100 / (1 + 13.0))


def test_rsi_requires_15_bars():
    with pytest.raises(InsufficientDataError):
        calc.latest_rsi(np.arange(1, 15, dtype=float))


def test_sma_falls_back_to_last_close():
    assert calc.sma(np.array([5.0, 6.0, 7.0]), 20) == 7.0
    assert calc.sma(np.arange(1, 21, dtype=float), 20) == pytest.approx(10.5)


def test_sma_series_alignment():
    series = calc.sma_series(np.arange(1, 6, dtype=float), 3)
    assert np.isnan(series[:2]).all()
    assert list(series[2:]) == pytest.approx([2.0, 3.0, 4.0])


def test_volatility_of_constant_series_is_zero():
    assert calc.volatility(np.full(10, 50.0)) == 0.0
    with pytest.raises(InsufficientDataError):
        calc.volatility(np.array([50.0]))


def test_volume_ratio_against_series_mean():
    assert calc.volume_ratio(np.array([100.0, 100.0, 400.0])) == pytest.approx(2.0)
    assert calc.volume_ratio(np.zeros(3)) == 0.0


# =============================================================================
# FIBONACCI
# =============================================================================


def test_fibonacci_levels():
    highs = np.full(20, 105.0)
    highs[7] = 110.0
    lows = np.full(20, 95.0)
    lows[12] = 90.0

    levels = calc.fibonacci_levels(highs, lows)

    assert levels["swing_high"] == 110.0
    assert levels["swing_low"] == 90.0
    assert levels["support"][0.618] == pytest.approx(97.64)
    assert levels["resistance"][0.618] == pytest.approx(102.36)


def test_fibonacci_uses_lookback_window_only():
    highs = np.array([500.0] + [110.0] * 20)
    lows = np.array([1.0] + [90.0] * 20)

    levels = calc.fibonacci_levels(highs, lows, lookback=20)

    assert levels["swing_high"] == 110.0
    assert levels["swing_low"] == 90.0


def test_fibonacci_requires_lookback_bars():
    with pytest.raises(InsufficientDataError):
        calc.fibonacci_levels(np.ones(19), np.ones(19))
