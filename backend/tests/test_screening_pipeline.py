import asyncio
from typing import Optional

import pytest

from app.schemas.analysis import ScreeningConfig
from app.schemas.market import SymbolData, Timeframe
from app.services.analysis import AnalysisService
from app.services.base import ExternalAPIError, ValidationError
from app.services.data_ingestion import SeriesProvider
from app.services.screening import ScreeningPipeline

from conftest import make_symbol_data


SERIES = {
    "UP": [100.0 + i for i in range(60)],
    "DOWN": [159.0 - i for i in range(60)],
    "FLAT": [100.0, 101.0] * 30,
    "SAW": [100.0 + (i % 7) * 2 for i in range(60)],
}


class FakeProvider(SeriesProvider):
    """Serves canned series and records how many fetches overlap."""

    def __init__(self, series: dict, failing: tuple = ()):
        self._series = series
        self._failing = failing
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def name(self) -> str:
        return "FakeProvider"

    async def fetch_series(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.D1,
        lookback: int = 90,
    ) -> Optional[SymbolData]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1

        if symbol in self._failing:
            raise ExternalAPIError(self.name, f"{symbol} unavailable")
        closes = self._series.get(symbol)
        if closes is None:
            return None
        return make_symbol_data(closes, symbol=symbol)


def run(config: ScreeningConfig, provider: Optional[FakeProvider] = None, **kwargs):
    pipeline = ScreeningPipeline(provider=provider or FakeProvider(SERIES), **kwargs)
    return asyncio.run(pipeline.run(config))


def expected_order(symbols, variant):
    service = AnalysisService()
    scored = [
        (service.analyze(make_symbol_data(SERIES[s], symbol=s), variant).score.value, s)
        for s in symbols
    ]
    return [s for _, s in sorted(scored, key=lambda item: item[0], reverse=True)]


@pytest.mark.parametrize("variant", ["accumulation", "breakout", "trend"])
def test_results_sorted_by_score(variant):
    universe = list(SERIES)

    response = run(ScreeningConfig(universe=universe, variant=variant, min_score=0, limit=10))

    assert response.total_screened == 4
    assert [r.symbol for r in response.results] == expected_order(universe, variant)
    assert response.candidates_found == len(response.results)
    assert response.criteria.variant == variant


def test_min_score_filters():
    response = run(ScreeningConfig(universe=list(SERIES), variant="trend", min_score=101))

    assert response.total_screened == 4
    assert response.results == []
    assert response.candidates_found == 0


def test_limit_truncates():
    universe = list(SERIES)

    response = run(ScreeningConfig(universe=universe, variant="trend", min_score=0, limit=2))

    assert [r.symbol for r in response.results] == expected_order(universe, "trend")[:2]


def test_ties_keep_universe_order():
    series = {"A": SERIES["SAW"], "B": SERIES["SAW"], "C": SERIES["SAW"]}

    forward = run(
        ScreeningConfig(universe=["A", "B", "C"], min_score=0), provider=FakeProvider(series)
    )
    backward = run(
        ScreeningConfig(universe=["C", "B", "A"], min_score=0), provider=FakeProvider(series)
    )

    assert [r.symbol for r in forward.results] == ["A", "B", "C"]
    assert [r.symbol for r in backward.results] == ["C", "B", "A"]


def test_failures_are_skipped_not_fatal():
    series = dict(SERIES, SHORT=[100.0 + i for i in range(20)])
    provider = FakeProvider(series, failing=("BROKEN",))

    response = run(
        ScreeningConfig(universe=["UP", "SHORT", "MISSING", "BROKEN", "DOWN"], min_score=0),
        provider=provider,
    )

    assert response.skipped == ["SHORT", "MISSING", "BROKEN"]
    assert response.total_screened == 2
    assert {r.symbol for r in response.results} == {"UP", "DOWN"}


def test_short_series_screened_by_breakout_only():
    series = dict(SERIES, SHORT=[100.0 + (i % 5) for i in range(20)])
    universe = ["UP", "SHORT"]

    accumulation = run(
        ScreeningConfig(universe=universe, variant="accumulation", min_score=0),
        provider=FakeProvider(series),
    )
    breakout = run(
        ScreeningConfig(universe=universe, variant="breakout", min_score=0),
        provider=FakeProvider(series),
    )

    assert accumulation.skipped == ["SHORT"]
    assert breakout.skipped == []
    assert breakout.total_screened == 2


def test_exclude_and_duplicates():
    response = run(
        ScreeningConfig(universe=["UP", "FLAT", "UP", "DOWN"], exclude=["up"], min_score=0)
    )

    assert response.total_screened == 2
    assert "UP" not in {r.symbol for r in response.results}


def test_price_band():
    # UP closes at 159, every other series near 100-112
    response = run(ScreeningConfig(universe=list(SERIES), variant="trend", min_score=0, min_price=130))
    assert [r.symbol for r in response.results] == ["UP"]

    response = run(ScreeningConfig(universe=list(SERIES), variant="trend", min_score=0, max_price=130))
    assert "UP" not in {r.symbol for r in response.results}
    assert len(response.results) == 3


def test_fetch_concurrency_is_bounded():
    series = {f"S{i}": SERIES["SAW"] for i in range(10)}
    provider = FakeProvider(series)

    run(ScreeningConfig(universe=list(series), min_score=0), provider=provider, max_concurrent=2)

    assert 1 <= provider.max_in_flight <= 2


def test_unknown_variant_fails_fast():
    with pytest.raises(ValidationError):
        run(ScreeningConfig(universe=["UP"], variant="no_such_variant"))
