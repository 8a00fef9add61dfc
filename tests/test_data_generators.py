"""
Fake compositeIndex payloads for testing.

Rows look like what BitMEX returns for
`columns=lastPrice,timestamp&reverse=true`: newest first, millisecond
RFC3339 timestamps with a `Z` suffix.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import MagicMock

import requests


def format_bitmex_timestamp(ts: datetime) -> str:
    """2023-01-01T00:00:00.000Z"""
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def generate_quote(
    ts: Optional[datetime] = None,
    price: float = 16999.6,
    symbol: Optional[str] = None,
) -> dict:
    """A single compositeIndex row."""
    ts = ts or datetime(2023, 1, 1, tzinfo=timezone.utc)
    row = {"timestamp": format_bitmex_timestamp(ts), "lastPrice": price}
    if symbol is not None:
        row["symbol"] = symbol
    return row


def generate_quote_page(
    n: int = 3,
    end: Optional[datetime] = None,
    step: timedelta = timedelta(minutes=1),
    start_price: float = 16999.6,
    price_step: float = 1.25,
) -> list[dict]:
    """`n` rows, newest first, ending at `end`."""
    end = end or datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc)
    return [
        generate_quote(end - i * step, start_price + i * price_step)
        for i in range(n)
    ]


def mock_response(payload=None, status_code: int = 200, text: Optional[str] = None) -> MagicMock:
    """A requests.Response stand-in.

    `text` (if given) is treated as a raw body that fails JSON decoding.
    """
    resp = MagicMock()
    resp.status_code = status_code
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Error", response=resp
        )
    if text is not None:
        resp.text = text
        resp.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    else:
        resp.json.return_value = payload
    return resp
