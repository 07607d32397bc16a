"""Freshness — one captured instant, rendered every way a page needs it.

The shell stamps the same moment into several places (a meta tag, every
marked ``<time>`` element, JSON-LD ``dateModified``, ``Last-Modified``).
Capturing once and deriving every representation from that value keeps
them consistent within a response.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime

# Fixed English month names: output must not depend on the process locale.
_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True, slots=True)
class Freshness:
    """A single captured instant and its derived representations.

    Attributes:
        instant: The captured moment, timezone-aware, in UTC.
        iso_instant: ``2025-08-27T14:03:09.120Z`` (millisecond precision).
        iso_date: ``2025-08-27`` — always ``iso_instant[:10]``.
        human_date: ``August 27, 2025`` (UTC calendar date).
    """

    instant: datetime
    iso_instant: str
    iso_date: str
    human_date: str

    @classmethod
    def capture(cls, now: datetime | None = None) -> "Freshness":
        """Capture the current instant (or *now*, when given)."""
        return cls.from_datetime(now if now is not None else datetime.now(UTC))

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Freshness":
        """Build from an explicit instant. Naive datetimes are taken as UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        utc = moment.astimezone(UTC)
        iso_instant = (
            utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"
        )
        return cls(
            instant=utc,
            iso_instant=iso_instant,
            iso_date=iso_instant[:10],
            human_date=f"{_MONTHS[utc.month - 1]} {utc.day}, {utc.year}",
        )

    @property
    def http_date(self) -> str:
        """The instant as an HTTP IMF-fixdate (``Wed, 27 Aug 2025 14:03:09 GMT``)."""
        return http_date(self.instant)


def http_date(moment: datetime) -> str:
    """Format *moment* for HTTP date headers. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return format_datetime(moment.astimezone(UTC), usegmt=True)
