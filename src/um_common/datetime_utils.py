"""Configurable store and HTML datetime formats."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DateTimeFormats:
    """strftime patterns used when reading store rows and rendering to clients.

    Built once from settings at the application edge and handed to the
    repositories and the service; nothing below the edge reads settings.
    """

    db: str = "%Y-%m-%d %H:%M:%S"
    html: str = "%Y-%m-%dT%H:%M"

    def parse_db(self, value: object) -> datetime:
        """Accept a driver-decoded datetime, or parse a string in the store format.

        Raises ValueError if *value* is neither.
        """
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            return datetime.strptime(value, self.db)
        raise ValueError(f"Unsupported datetime value: {value!r}")

    def to_html(self, value: datetime | None) -> str | None:
        return value.strftime(self.html) if value is not None else None


DEFAULT_DATETIME_FORMATS = DateTimeFormats()
