"""BitMEX compositeIndex ingestion: paginated fetch mapped to outcome records."""

import json
import logging
from typing import Optional

import requests

from .api_client import DEFAULT_BASE_URL, DEFAULT_MIN_INTERVAL, DEFAULT_TIMEOUT, api_get
from .indices import Granularity, Index
from .normalize import OutcomeRecord, RawQuote, map_quote, parse_quotes
from .pagination import MAX_PAGE_SIZE, PageDescriptor, paginate, total_results_for

logger = logging.getLogger(__name__)

COMPOSITE_INDEX_ENDPOINT = "/instrument/compositeIndex"
COLUMNS = "lastPrice,timestamp"


def build_filter(index: Index, granularity: Granularity) -> str:
    """Server-side JSON filter: this symbol, on-the-minute or on-the-hour rows."""
    flt = {"symbol": index.api_symbol}
    flt.update(granularity.timestamp_filter)
    return json.dumps(flt, separators=(",", ":"))


def build_query(index: Index, granularity: Granularity, page: PageDescriptor) -> dict:
    params = {
        "symbol": index.api_symbol,
        "filter": build_filter(index, granularity),
        "columns": COLUMNS,
        "reverse": "true",
    }
    params.update(page.as_params())
    return params


def fetch_page(
    index: Index,
    granularity: Granularity,
    page: PageDescriptor,
    api_settings: Optional[dict] = None,
    session: Optional[requests.Session] = None,
) -> list[RawQuote]:
    """Fetch and decode one page of quotes (latest first within the page)."""
    api_settings = api_settings or {}
    data = api_get(
        COMPOSITE_INDEX_ENDPOINT,
        params=build_query(index, granularity, page),
        base_url=api_settings.get("base_url", DEFAULT_BASE_URL),
        timeout=api_settings.get("timeout", DEFAULT_TIMEOUT),
        min_interval=api_settings.get("min_request_interval", DEFAULT_MIN_INTERVAL),
        session=session,
    )
    return parse_quotes(data)


def fetch_outcomes(
    index: Index,
    lookback_hours: int,
    granularity: Granularity = Granularity.MINUTE,
    api_settings: Optional[dict] = None,
    session: Optional[requests.Session] = None,
) -> list[OutcomeRecord]:
    """Fetch every page for the lookback window and map quotes to outcomes.

    Pages are walked in offset order and their records concatenated as-is;
    results are not re-sorted by timestamp. The first transport or decode
    failure propagates, so a caller never sees a partial batch.
    """
    total = total_results_for(lookback_hours, granularity)
    pages = paginate(total, MAX_PAGE_SIZE)
    logger.info(f"Fetching {total} {granularity.value} samples of {index.api_symbol} "
                f"in {len(pages)} page(s)")

    outcomes = []
    for i, page in enumerate(pages):
        quotes = fetch_page(index, granularity, page, api_settings=api_settings, session=session)
        outcomes.extend(map_quote(q, index) for q in quotes)
        logger.info(f"  page {i + 1}/{len(pages)} (start={page.offset}, count={page.count}): "
                    f"{len(quotes)} quotes, {len(outcomes)} so far")

    return outcomes
