"""Day-by-day correlation of grid carbon intensity with COVID case counts."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, List, Optional

from carbovid.config import Config
from carbovid.exceptions import UpstreamError, ValidationError
from carbovid.models import CorrelatedRecord, CorrelationResult, DateRange, DayOutcome
from carbovid.providers.base import UpstreamClient
from carbovid.providers.carbonintensity import PROVIDER_NAME as CARBON_PROVIDER
from carbovid.providers.coronavirus import PROVIDER_NAME as COVID_PROVIDER
from carbovid.providers.helpers import get_providers
from carbovid.regions import DEFAULT_DIRECTORY, RegionDirectory
from carbovid.utils.date_range import DateRangeParser


logger = logging.getLogger(__name__)


class CorrelationEngine:
    """Merges the per-day readings of both upstream clients over a date range.

    A day is only part of the output when both clients return a reading for
    it. Failed days are kept as skipped :class:`DayOutcome` entries on the
    result and logged, but never serialized.
    """

    def __init__(
        self,
        carbon_client: UpstreamClient,
        covid_client: UpstreamClient,
        directory: RegionDirectory = DEFAULT_DIRECTORY,
        parser: Optional[DateRangeParser] = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.carbon_client = carbon_client
        self.covid_client = covid_client
        self.directory = directory
        self.parser = parser or DateRangeParser()
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, cfg: Config, directory: RegionDirectory = DEFAULT_DIRECTORY) -> "CorrelationEngine":
        providers = get_providers(cfg.upstream, directory)
        return cls(
            carbon_client=providers[CARBON_PROVIDER],
            covid_client=providers[COVID_PROVIDER],
            directory=directory,
            parser=DateRangeParser(max_days=cfg.correlation.max_range_days),
            max_workers=cfg.correlation.max_workers,
        )

    def correlate_query(self, region_id: Any, from_str: Optional[str], to_str: Optional[str] = None) -> CorrelationResult:
        """Validate raw query values, then correlate."""
        try:
            self.directory.resolve(region_id)
            date_range = self.parser.parse(from_str, to_str)
        except ValidationError as exc:
            logger.info("Rejected query region_id=%r from=%r to=%r: %s", region_id, from_str, to_str, exc)
            return CorrelationResult.failure(str(exc))

        return self.correlate(region_id, date_range)

    def correlate(self, region_id: Any, date_range: DateRange) -> CorrelationResult:
        """Correlate both data sources for every day in ``date_range``."""
        try:
            region = self.directory.resolve(region_id)
        except ValidationError as exc:
            return CorrelationResult.failure(str(exc))

        try:
            self.parser.validate(date_range)
        except ValidationError as exc:
            logger.info("Rejected range %s..%s: %s", date_range.start, date_range.end, exc)
            return CorrelationResult.failure(str(exc))

        logger.info(
            "Correlating region %s (%s) from %s to %s",
            region.region_id,
            region.carbon_region_name,
            date_range.start,
            date_range.end,
        )

        days = list(date_range.days())
        if self.max_workers == 1 or len(days) == 1:
            outcomes = [self._correlate_day(region.region_id, day) for day in days]
        else:
            # map() yields in submission order, which keeps the output sorted by day
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(days))) as pool:
                outcomes = list(pool.map(lambda d: self._correlate_day(region.region_id, d), days))

        records: List[CorrelatedRecord] = [outcome.record for outcome in outcomes if outcome.ok]

        skipped = len(outcomes) - len(records)
        if skipped:
            logger.warning("Skipped %d of %d days for region %s", skipped, len(outcomes), region.region_id)

        return CorrelationResult(region=region.carbon_region_name, data=records, error=None, outcomes=outcomes)

    def _correlate_day(self, region_id: int, day: date) -> DayOutcome:
        try:
            carbon = self.carbon_client.fetch(region_id, day)
        except UpstreamError as exc:
            logger.warning("No carbon data for region %s on %s: %s", region_id, day, exc)
            return DayOutcome(day=day, reason=f"carbon: {exc.reason}")

        try:
            covid = self.covid_client.fetch(region_id, day)
        except UpstreamError as exc:
            logger.warning("No covid data for region %s on %s: %s", region_id, day, exc)
            return DayOutcome(day=day, reason=f"covid: {exc.reason}")

        return DayOutcome(
            day=day,
            record=CorrelatedRecord(
                date=day,
                cumulative_covid_cases=covid.cumulative_cases,
                carbon_intensity=carbon.forecast_intensity,
            ),
        )
