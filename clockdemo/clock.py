from datetime import datetime, timezone as dt_timezone

import pytz

from clockdemo.config import ConfigError

# e.g. "Mon Jan 02 15:04:05 MST 2006"
TIME_LAYOUT = "%a %b %d %H:%M:%S %Z %Y"


def utc_now():
    return datetime.now(dt_timezone.utc)


class TimeFormatter:
    """
    Formats instants in the fixed TIME_LAYOUT.

    timezone is an IANA name ("America/Sao_Paulo"); None keeps the host's
    local zone. now returns the current aware UTC datetime.
    """

    def __init__(self, timezone=None, now=None):
        self.timezone = timezone
        self._now = now or utc_now
        if timezone is None:
            self._tz = None
        else:
            try:
                self._tz = pytz.timezone(timezone)
            except pytz.UnknownTimeZoneError as e:
                raise ConfigError(f"unknown time zone {timezone!r}") from e

    def format(self, instant: datetime) -> str:
        if self._tz is None:
            local = instant.astimezone()
        else:
            local = instant.astimezone(self._tz)
        return local.strftime(TIME_LAYOUT)

    def now(self) -> str:
        return self.format(self._now())
