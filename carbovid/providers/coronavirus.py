"""UK coronavirus dashboard client for daily case counts per health area."""

import gzip
import json
import logging
import zlib
from datetime import date
from urllib.parse import quote

import requests
from pydantic import ValidationError as SchemaError
from requests import HTTPError, RequestException

from carbovid.config import UpstreamConfig
from carbovid.exceptions import RegionNotFoundError, UpstreamError
from carbovid.models import CovidResponse, DailyCovidReading
from carbovid.regions import DEFAULT_DIRECTORY, RegionDirectory

from .base import UpstreamClient


logger = logging.getLogger(__name__)

PROVIDER_NAME = "coronavirus"
GZIP_MAGIC = b"\x1f\x8b"

# Output field -> dashboard metric
STRUCTURE = {
    "date": "date",
    "name": "areaName",
    "dailyCases": "newCasesByPublishDate",
    "cumulativeCases": "cumCasesByPublishDate",
    "dailyDeaths": "newDeaths28DaysByPublishDate",
    "cumulativeDeaths": "cumDeaths28DaysByPublishDate",
}


def decode_body(body: bytes) -> bytes:
    """Gunzip ``body`` unless the transport already decoded it."""
    if not body.startswith(GZIP_MAGIC):
        return body
    try:
        return gzip.decompress(body)
    except (OSError, EOFError, zlib.error) as exc:
        raise UpstreamError(PROVIDER_NAME, f"could not decompress body: {exc}") from exc


class CovidClient(UpstreamClient):
    """Client for the v1 data endpoint of api.coronavirus.data.gov.uk."""

    def __init__(self, config: UpstreamConfig, directory: RegionDirectory = DEFAULT_DIRECTORY):
        self.config = config
        self.directory = directory
        self.base_url = config.covid_base_url.rstrip("/")

    def build_url(self, region_id: int, day: date) -> str:
        """URL filtering on the region's health area and the exact day."""
        try:
            region = self.directory.resolve(region_id)
        except RegionNotFoundError as exc:
            raise UpstreamError(PROVIDER_NAME, f"no health area for region {region_id!r}") from exc

        filters = (
            f"areaName={quote(region.covid_area_name, safe='')};"
            f"areaType={region.covid_area_type};"
            f"date={day.isoformat()}"
        )
        structure = quote(json.dumps(STRUCTURE, separators=(",", ":")), safe="")
        return f"{self.base_url}/v1/data?filters={filters}&structure={structure}"

    def _get(self, url: str) -> bytes:
        """Perform a GET request with shared error handling and return the decoded body."""
        logger.debug("Covid request: %s", url)
        try:
            response = requests.get(url, timeout=self.config.timeout_seconds, headers={"Accept-Encoding": "gzip"})
            response.raise_for_status()
        except (HTTPError, RequestException) as exc:
            logger.error("Coronavirus dashboard request error: %s", exc)
            raise UpstreamError(PROVIDER_NAME, f"request failed: {exc}") from exc

        # The dashboard answers 204 for days without data
        if response.status_code == 204 or not response.content:
            raise UpstreamError(PROVIDER_NAME, "empty response")

        return decode_body(response.content)

    def fetch_raw(self, region_id: int, day: date) -> CovidResponse:
        """Get the upstream response for one region and day."""
        body = self._get(self.build_url(region_id, day))
        try:
            return CovidResponse.model_validate_json(body)
        except SchemaError as exc:
            logger.error("Coronavirus dashboard schema mismatch: %s", exc)
            raise UpstreamError(PROVIDER_NAME, "unexpected response schema") from exc

    def fetch(self, region_id: int, day: date) -> DailyCovidReading:
        """Get the case counts for one region and day."""
        response = self.fetch_raw(region_id, day)

        if not response.data:
            raise UpstreamError(PROVIDER_NAME, f"no data for region {region_id} on {day.isoformat()}")

        entry = response.data[0]
        return DailyCovidReading(
            date=day,
            area_name=entry.name,
            daily_cases=entry.dailyCases,
            cumulative_cases=entry.cumulativeCases,
            daily_deaths=entry.dailyDeaths,
            cumulative_deaths=entry.cumulativeDeaths,
        )
