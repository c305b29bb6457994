"""Data models for Carbovid service."""

import datetime as dt
from typing import Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


AreaType = Literal["nation", "region"]


class RegionDescriptor(BaseModel):
    """Names a grid region carries in each upstream vocabulary."""

    model_config = ConfigDict(frozen=True)

    region_id: int
    carbon_region_name: str
    covid_area_name: str
    covid_area_type: AreaType


class DateRange(BaseModel):
    """Inclusive range of calendar days."""

    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date

    def days(self) -> Iterator[dt.date]:
        """Yield every day from start to end, both inclusive."""
        current = self.start
        while current <= self.end:
            yield current
            current += dt.timedelta(days=1)

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)


class FuelShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    fuel: str
    percentage: float


class DailyCarbonReading(BaseModel):
    """Carbon intensity forecast of one region for one day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    forecast_intensity: NonNegativeInt
    index: str
    fuel_mix: List[FuelShare] = Field(default_factory=list)


class DailyCovidReading(BaseModel):
    """Case (and, where reported, death) counts of one health area for one day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    area_name: str
    daily_cases: int
    cumulative_cases: int
    daily_deaths: Optional[int] = None
    cumulative_deaths: Optional[int] = None


class CorrelatedRecord(BaseModel):
    """One day of the merged output."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    cumulative_covid_cases: Optional[int] = None
    carbon_intensity: Optional[int] = None


class DayOutcome(BaseModel):
    """Result of correlating a single day, either a record or a skip reason."""

    model_config = ConfigDict(frozen=True)

    day: dt.date
    record: Optional[CorrelatedRecord] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


class CorrelationResult(BaseModel):
    """Body of the /main endpoint."""

    region: Optional[str] = None
    data: Optional[List[CorrelatedRecord]] = None
    error: Optional[str] = None
    outcomes: List[DayOutcome] = Field(default_factory=list, exclude=True)

    @classmethod
    def failure(cls, message: str) -> "CorrelationResult":
        return cls(region=None, data=None, error=message)


# Upstream schemas. Field names follow the upstream JSON.


class CarbonIntensity(BaseModel):
    forecast: int
    index: str


class CarbonGeneration(BaseModel):
    fuel: str
    perc: float


class CarbonPeriod(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    intensity: CarbonIntensity
    generationmix: List[CarbonGeneration] = Field(default_factory=list)


class CarbonRegionData(BaseModel):
    regionid: Optional[int] = None
    dnoregion: Optional[str] = None
    shortname: Optional[str] = None
    data: List[CarbonPeriod]


class CarbonResponse(BaseModel):
    """Response model for the Carbon Intensity regional endpoint."""

    data: CarbonRegionData


class CovidDay(BaseModel):
    date: str
    name: str
    dailyCases: int
    cumulativeCases: int
    dailyDeaths: Optional[int] = None
    cumulativeDeaths: Optional[int] = None


class CovidResponse(BaseModel):
    """Response model for the coronavirus dashboard v1 data endpoint."""

    data: List[CovidDay]
