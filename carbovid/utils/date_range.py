"""Parsing of user supplied day ranges."""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from carbovid.exceptions import DateParseError, InvalidRangeError, RangeTooLongError
from carbovid.models import DateRange


DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class DateRangeParser:
    """Turns ``from``/``to`` query strings into a :class:`DateRange`."""

    def __init__(self, max_days: Optional[int] = None) -> None:
        self.max_days = max_days

    @staticmethod
    def parse_date(value: Optional[str], name: str) -> date:
        """
        Parse a single ``YYYY-MM-DD`` string.

        Args:
            value: The raw string
            name: Query parameter name, used in the error message

        Returns:
            The calendar date, without any time or timezone component
        """
        value = value.strip() if value else ""
        # strptime alone would also take "2023-6-1"
        if not DATE_PATTERN.fullmatch(value):
            raise DateParseError(f"Unable to parse `{name}` date")
        try:
            return datetime.strptime(value, DATE_FORMAT).date()
        except ValueError as exc:
            raise DateParseError(f"Unable to parse `{name}` date") from exc

    def parse(self, from_str: Optional[str], to_str: Optional[str] = None) -> DateRange:
        """
        Build an inclusive range from the two query strings.

        Args:
            from_str: Start day (required)
            to_str: End day; when omitted the range ends one day after the start

        Returns:
            The normalized DateRange
        """
        start = self.parse_date(from_str, "from")
        end = self.parse_date(to_str, "to") if to_str else start + timedelta(days=1)

        date_range = DateRange(start=start, end=end)
        self.validate(date_range)
        return date_range

    def validate(self, date_range: DateRange) -> None:
        """Raise if the range is reversed or longer than ``max_days``."""
        if date_range.start > date_range.end:
            raise InvalidRangeError()
        if self.max_days is not None and len(date_range) > self.max_days:
            raise RangeTooLongError(f"date range exceeds the maximum of {self.max_days} days")
