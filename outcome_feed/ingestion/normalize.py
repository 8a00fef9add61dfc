"""Turn raw compositeIndex rows into outcome records.

An outcome id is derived only from the index symbol and the quote time, so
re-running over an overlapping window reproduces the same ids. Consumers
rely on that to deduplicate.
"""

import json
import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone

from ..exceptions import DecodeError, FormatError
from .indices import Index

logger = logging.getLogger(__name__)

U64_MAX = 2 ** 64 - 1


@dataclass(frozen=True)
class RawQuote:
    """One compositeIndex sample. `timestamp` is timezone-aware UTC."""
    timestamp: datetime
    price: float


@dataclass(frozen=True)
class OutcomeRecord:
    id: str
    outcome: str

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


def _parse_timestamp(value) -> datetime:
    if not isinstance(value, str):
        raise DecodeError(f"timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError as e:
        raise DecodeError(f"Invalid RFC3339 timestamp '{value}'") from e
    if ts.tzinfo is None:
        raise DecodeError(f"Timestamp '{value}' has no UTC offset")
    return ts.astimezone(timezone.utc)


def parse_quote(payload) -> RawQuote:
    """Decode one `{"timestamp": ..., "lastPrice": ...}` element."""
    if not isinstance(payload, dict):
        raise DecodeError(f"Quote must be a JSON object, got {type(payload).__name__}")
    missing = [k for k in ("timestamp", "lastPrice") if k not in payload]
    if missing:
        raise DecodeError(f"Quote missing fields: {missing}", details={"quote": payload})

    price = payload["lastPrice"]
    # bool is an int subclass; reject it explicitly
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise DecodeError(f"lastPrice must be a number, got {price!r}", details={"quote": payload})

    return RawQuote(timestamp=_parse_timestamp(payload["timestamp"]), price=float(price))


def parse_quotes(payload) -> list[RawQuote]:
    """Decode a full response body. The API returns a JSON array of quotes."""
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array of quotes, got {type(payload).__name__}")
    return [parse_quote(item) for item in payload]


def format_timestamp(ts: datetime) -> str:
    """Render as YYYY-MM-DDTHH:MM:SS, dropping sub-seconds and the offset.

    The id carries no offset marker, so only UTC timestamps are accepted.
    """
    if ts.tzinfo is None or ts.utcoffset() != timedelta(0):
        raise FormatError(f"Timestamp must be UTC to render an outcome id, got {ts!r}")
    return ts.replace(microsecond=0, tzinfo=None).isoformat(timespec="seconds")


def truncate_price(price: float) -> int:
    """Truncate toward zero into the unsigned 64-bit range.

    Negative and NaN prices become 0; anything past the top saturates.
    """
    if math.isnan(price) or price <= 0:
        return 0
    if price >= U64_MAX:
        return U64_MAX
    return int(price)


def outcome_id(index: Index, ts: datetime) -> str:
    return f"/{index.symbol}/{format_timestamp(ts)}.price"


def map_quote(quote: RawQuote, index: Index) -> OutcomeRecord:
    """Build the outcome record for one quote of `index`."""
    return OutcomeRecord(
        id=outcome_id(index, quote.timestamp),
        outcome=str(truncate_price(quote.price)),
    )
