"""Carbon Intensity API client for regional GB forecasts."""

import logging
from datetime import date, datetime, time, timedelta

import requests
from pydantic import ValidationError as SchemaError
from requests import HTTPError, RequestException

from carbovid.config import UpstreamConfig
from carbovid.exceptions import UpstreamError
from carbovid.models import CarbonResponse, DailyCarbonReading, FuelShare

from .base import UpstreamClient


logger = logging.getLogger(__name__)

PROVIDER_NAME = "carbonintensity"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class CarbonClient(UpstreamClient):
    """Client for the regional endpoint of api.carbonintensity.org.uk."""

    def __init__(self, config: UpstreamConfig):
        self.config = config
        self.base_url = config.carbon_base_url.rstrip("/")

    def build_url(self, region_id: int, day: date) -> str:
        """URL for the window ``[day, day + 1)``."""
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        return (
            f"{self.base_url}/regional/intensity/"
            f"{start.strftime(TIMESTAMP_FORMAT)}/{end.strftime(TIMESTAMP_FORMAT)}/regionid/{region_id}"
        )

    def _get(self, url: str) -> dict:
        """Perform a GET request with shared error handling."""
        logger.debug("Carbon request: %s", url)
        try:
            response = requests.get(url, timeout=self.config.timeout_seconds, headers={"Accept": "application/json"})
            response.raise_for_status()
            return response.json()
        except (HTTPError, RequestException) as exc:
            logger.error("Carbon Intensity request error: %s", exc)
            raise UpstreamError(PROVIDER_NAME, f"request failed: {exc}") from exc
        except ValueError as exc:
            logger.error("Carbon Intensity returned invalid JSON: %s", exc)
            raise UpstreamError(PROVIDER_NAME, "invalid JSON body") from exc

    def fetch_raw(self, region_id: int, day: date) -> CarbonResponse:
        """Get the upstream response for one region and day."""
        payload = self._get(self.build_url(region_id, day))
        try:
            return CarbonResponse.model_validate(payload)
        except SchemaError as exc:
            logger.error("Carbon Intensity schema mismatch: %s", exc)
            raise UpstreamError(PROVIDER_NAME, "unexpected response schema") from exc

    def fetch(self, region_id: int, day: date) -> DailyCarbonReading:
        """Get the forecast intensity and fuel mix for one region and day."""
        response = self.fetch_raw(region_id, day)

        periods = response.data.data
        if not periods:
            raise UpstreamError(PROVIDER_NAME, f"no data for region {region_id} on {day.isoformat()}")

        first = periods[0]
        try:
            return DailyCarbonReading(
                date=day,
                forecast_intensity=first.intensity.forecast,
                index=first.intensity.index,
                fuel_mix=[FuelShare(fuel=g.fuel, percentage=g.perc) for g in first.generationmix],
            )
        except SchemaError as exc:
            raise UpstreamError(PROVIDER_NAME, f"invalid reading: {exc}") from exc
