"""
Project Cmxdump - Timestamp Codec

Converts the CMX ``seenTime`` field between datetime values and the
fixed ``YYYY-MM-DDTHH:MM:SS.sssZ`` text form.
"""

import logging
from functools import lru_cache
from datetime import datetime, timezone
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .utils import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Mexico_City"

# Rendered as "<layout>.<milliseconds>Z". The Z is literal, the clock is the codec zone.
TIMESTAMP_LAYOUT = "%Y-%m-%dT%H:%M:%S"

# Returned when a timestamp cannot be parsed
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_rfc3339(text: str) -> datetime:
    """
    Parse an RFC 3339 date-time. The offset is mandatory.

    Args:
        text: Value such as "2020-01-01T00:00:00Z"

    Returns:
        Aware datetime in UTC

    Raises:
        ValueError: If the text is not a valid RFC 3339 date-time
    """
    value = datetime.fromisoformat(text.replace("Z", "+00:00").replace("z", "+00:00"))
    if value.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {text!r}")
    return value.astimezone(timezone.utc)


class TimestampCodec:
    """
    Encoder/decoder for CMX timestamps.

    Encoding renders the value in a fixed reference zone. Decoding accepts
    RFC 3339 and falls back to EPOCH on anything it cannot parse.
    """

    def __init__(self, tz_name: str = DEFAULT_TIMEZONE):
        """
        Args:
            tz_name: IANA zone used when encoding

        Raises:
            ConfigurationError: If the zone cannot be resolved
        """
        try:
            self.zone = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Cannot resolve time zone {tz_name!r}: {e}") from e
        self.tz_name = tz_name

    def encode(self, value: datetime) -> str:
        """
        Render a datetime in the reference zone.

        Naive values are taken as UTC.
        """
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        local = value.astimezone(self.zone)
        return f"{local.strftime(TIMESTAMP_LAYOUT)}.{local.microsecond // 1000:03d}Z"

    def encode_json(self, value: datetime) -> str:
        """Encoded value as a quoted JSON string."""
        return f'"{self.encode(value)}"'

    def decode(self, value: Union[str, bytes, None]) -> datetime:
        """
        Parse a JSON string value (quotes optional).

        Returns:
            Aware datetime, or EPOCH if the value does not parse
        """
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        if not isinstance(value, str):
            logger.warning(f"Timestamp is not a string: {value!r}, using {EPOCH.isoformat()}")
            return EPOCH

        text = value.strip()
        if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
            text = text[1:-1]

        try:
            return parse_rfc3339(text)
        except ValueError as e:
            logger.warning(f"Cannot parse timestamp {text!r} ({e}), using {EPOCH.isoformat()}")
            return EPOCH


@lru_cache(maxsize=None)
def default_codec() -> TimestampCodec:
    """Shared codec for DEFAULT_TIMEZONE, built on first use."""
    return TimestampCodec(DEFAULT_TIMEZONE)
