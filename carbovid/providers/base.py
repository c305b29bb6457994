"""Base interface for the per-day upstream clients."""

from abc import ABC, abstractmethod
from datetime import date

from pydantic import BaseModel


class UpstreamClient(ABC):
    """Abstract base class for clients that fetch one region for one day."""

    @abstractmethod
    def fetch_raw(self, region_id: int, day: date) -> BaseModel:
        """Return the parsed upstream response for a region and day."""

    @abstractmethod
    def fetch(self, region_id: int, day: date) -> BaseModel:
        """Return the reading for a region and day, raising UpstreamError on failure."""
