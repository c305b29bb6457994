"""Tests for the correlation engine."""

from datetime import date, timedelta
from typing import Iterable, List, Tuple

import pytest

from carbovid.config import Config, CorrelationConfig
from carbovid.correlation import CorrelationEngine
from carbovid.exceptions import UpstreamError
from carbovid.models import DailyCarbonReading, DailyCovidReading, DateRange
from carbovid.providers.carbonintensity import CarbonClient
from carbovid.providers.coronavirus import CovidClient
from carbovid.utils.date_range import DateRangeParser


class _FakeCarbonClient:
    def __init__(self, failing_days: Iterable[date] = ()) -> None:
        self.failing_days = set(failing_days)
        self.calls: List[Tuple[int, date]] = []

    def fetch(self, region_id: int, day: date) -> DailyCarbonReading:
        self.calls.append((region_id, day))
        if day in self.failing_days:
            raise UpstreamError("carbonintensity", "request failed")
        return DailyCarbonReading(date=day, forecast_intensity=100 + day.day, index="moderate")


class _FakeCovidClient:
    def __init__(self, failing_days: Iterable[date] = ()) -> None:
        self.failing_days = set(failing_days)
        self.calls: List[Tuple[int, date]] = []

    def fetch(self, region_id: int, day: date) -> DailyCovidReading:
        self.calls.append((region_id, day))
        if day in self.failing_days:
            raise UpstreamError("coronavirus", "no data")
        return DailyCovidReading(
            date=day, area_name="England", daily_cases=10, cumulative_cases=1000 + day.day
        )


def _engine(carbon=None, covid=None, **kwargs) -> CorrelationEngine:
    return CorrelationEngine(carbon or _FakeCarbonClient(), covid or _FakeCovidClient(), **kwargs)


def _range(start: date, days: int) -> DateRange:
    return DateRange(start=start, end=start + timedelta(days=days - 1))


DAY_1 = date(2023, 6, 10)
DAY_2 = date(2023, 6, 11)
DAY_3 = date(2023, 6, 12)


@pytest.mark.parametrize("region_id", [0, 18, "abc", None, 1.5])
def test_invalid_region_makes_no_upstream_calls(region_id) -> None:
    carbon, covid = _FakeCarbonClient(), _FakeCovidClient()

    result = _engine(carbon, covid).correlate(region_id, _range(DAY_1, 2))

    assert result.error == "Invalid region id"
    assert result.region is None
    assert result.data is None
    assert not carbon.calls
    assert not covid.calls


def test_reversed_range_is_rejected() -> None:
    carbon = _FakeCarbonClient()

    result = _engine(carbon).correlate(15, DateRange(start=date(2023, 6, 15), end=date(2023, 6, 10)))

    assert result.error == "to date is before from date"
    assert result.data is None
    assert not carbon.calls


def test_region_is_checked_before_range() -> None:
    result = _engine().correlate(0, DateRange(start=date(2023, 6, 15), end=date(2023, 6, 10)))
    assert result.error == "Invalid region id"


def test_full_range() -> None:
    result = _engine().correlate(5, _range(DAY_1, 3))

    assert result.error is None
    assert result.region == "Yorkshire"
    assert [r.date for r in result.data] == [DAY_1, DAY_2, DAY_3]
    assert result.data[0].carbon_intensity == 110
    assert result.data[0].cumulative_covid_cases == 1010
    assert all(o.ok for o in result.outcomes)


def test_failed_carbon_day_is_skipped() -> None:
    carbon, covid = _FakeCarbonClient(failing_days=[DAY_2]), _FakeCovidClient()

    result = _engine(carbon, covid).correlate(15, _range(DAY_1, 3))

    assert [r.date for r in result.data] == [DAY_1, DAY_3]
    assert [o.ok for o in result.outcomes] == [True, False, True]
    assert result.outcomes[1].reason.startswith("carbon")
    # covid is not queried for a day whose carbon data is missing
    assert [day for _, day in covid.calls] == [DAY_1, DAY_3]


def test_failed_covid_day_is_skipped() -> None:
    result = _engine(covid=_FakeCovidClient(failing_days=[DAY_1])).correlate(15, _range(DAY_1, 3))

    assert [r.date for r in result.data] == [DAY_2, DAY_3]
    assert result.outcomes[0].reason == "covid: no data"


def test_all_days_failing_returns_empty_list() -> None:
    carbon = _FakeCarbonClient(failing_days=[DAY_1, DAY_2])

    result = _engine(carbon).correlate(15, _range(DAY_1, 2))

    assert result.error is None
    assert result.region == "England"
    assert result.data == []


def test_skipped_days_are_logged(caplog) -> None:
    with caplog.at_level("WARNING", logger="carbovid.correlation"):
        _engine(_FakeCarbonClient(failing_days=[DAY_2])).correlate(15, _range(DAY_1, 3))

    assert "No carbon data for region 15 on 2023-06-11" in caplog.text


def test_outcomes_are_not_serialized() -> None:
    result = _engine().correlate(15, _range(DAY_1, 1))

    assert result.model_dump(mode="json") == {
        "region": "England",
        "data": [{"date": "2023-06-10", "cumulative_covid_cases": 1010, "carbon_intensity": 110}],
        "error": None,
    }


def test_idempotent() -> None:
    engine = _engine(_FakeCarbonClient(failing_days=[DAY_2]))

    first = engine.correlate(3, _range(DAY_1, 3)).model_dump_json()
    second = engine.correlate(3, _range(DAY_1, 3)).model_dump_json()

    assert first == second


def test_concurrent_fetch_keeps_order() -> None:
    carbon = _FakeCarbonClient(failing_days=[date(2023, 6, 14)])
    date_range = _range(DAY_1, 10)

    sequential = _engine(_FakeCarbonClient(failing_days=[date(2023, 6, 14)])).correlate(8, date_range)
    concurrent = _engine(carbon, max_workers=4).correlate(8, date_range)

    assert concurrent.model_dump_json() == sequential.model_dump_json()
    assert [r.date for r in concurrent.data] == sorted(r.date for r in concurrent.data)
    assert len(carbon.calls) == 10


def test_invalid_max_workers() -> None:
    with pytest.raises(ValueError):
        _engine(max_workers=0)


class TestCorrelateQuery:
    """Tests for the query-string entry point."""

    def test_default_window_covers_two_days(self) -> None:
        carbon = _FakeCarbonClient()

        result = _engine(carbon).correlate_query("15", "2023-06-10")

        assert [r.date for r in result.data] == [DAY_1, DAY_2]
        assert [day for _, day in carbon.calls] == [DAY_1, DAY_2]

    def test_reversed_dates(self) -> None:
        result = _engine().correlate_query(15, "2023-06-15", "2023-06-10")
        assert result.error == "to date is before from date"

    def test_unparsable_date(self) -> None:
        carbon = _FakeCarbonClient()

        result = _engine(carbon).correlate_query(15, "10-06-2023")

        assert result.error == "Unable to parse `from` date"
        assert result.data is None
        assert not carbon.calls

    def test_invalid_region_before_date_parsing(self) -> None:
        result = _engine().correlate_query("nope", "garbage")
        assert result.error == "Invalid region id"

    def test_range_limit(self) -> None:
        engine = _engine(parser=DateRangeParser(max_days=2))

        result = engine.correlate_query(15, "2023-06-10", "2023-06-12")

        assert result.error == "date range exceeds the maximum of 2 days"


def test_from_config() -> None:
    cfg = Config(correlation=CorrelationConfig(max_workers=3, max_range_days=31))

    engine = CorrelationEngine.from_config(cfg)

    assert isinstance(engine.carbon_client, CarbonClient)
    assert isinstance(engine.covid_client, CovidClient)
    assert engine.max_workers == 3
    assert engine.parser.max_days == 31
