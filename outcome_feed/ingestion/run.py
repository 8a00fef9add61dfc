"""Run one fetch-and-publish cycle: compositeIndex -> outcomes -> Redis list."""

import argparse
import logging
import sys
from typing import Optional

import requests

from ..config import load_settings
from ..exceptions import ConfigError, OutcomeFeedError
from ..publishing.redis_queue import RedisQueue
from .bitmex import fetch_outcomes
from .indices import Granularity, Index

logger = logging.getLogger(__name__)


def run_pipeline(
    settings: dict,
    index: Index,
    granularity: Granularity,
    lookback_hours: int,
    publisher: Optional[RedisQueue] = None,
    session: Optional[requests.Session] = None,
) -> int:
    """Fetch the lookback window and publish it as one batch.

    With no publisher the records are only logged (dry run). Returns the
    number of records fetched.
    """
    outcomes = fetch_outcomes(
        index,
        lookback_hours,
        granularity=granularity,
        api_settings=settings.get("api"),
        session=session,
    )

    if publisher is None:
        for record in outcomes:
            logger.info(f"  {record.id} = {record.outcome}")
        logger.info(f"Dry run: {len(outcomes)} outcomes not published")
        return len(outcomes)

    publisher.publish(outcomes)
    return len(outcomes)


def _lookback_hours(value) -> int:
    try:
        if isinstance(value, bool) or not float(value).is_integer():
            raise ValueError(value)
        hours = int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ConfigError(f"Lookback hours must be an integer, got {value!r}") from None
    if hours < 1:
        raise ConfigError(f"Lookback hours must be positive, got {hours}")
    return hours


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Publish BitMEX composite index prices as outcomes to a Redis list"
    )
    parser.add_argument("--redis", help="Redis connection URL (default: $REDIS_URL)")
    parser.add_argument("--hours", type=int, help="Lookback window in hours")
    parser.add_argument("--queue", help="Name of the Redis list to append to")
    parser.add_argument("--index", help="Index to fetch: BTC or ETH")
    parser.add_argument("--granularity", help="Sample granularity: minute or hour")
    parser.add_argument("--config", help="Path to settings.yaml")
    parser.add_argument("--dry-run", action="store_true", help="Fetch and log outcomes without publishing")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    )

    try:
        settings = load_settings(args.config)
        fetch_cfg = settings["fetch"]
        publish_cfg = settings["publish"]

        index = Index.from_selector(args.index or fetch_cfg["index"])
        granularity = Granularity.from_selector(args.granularity or fetch_cfg["granularity"])
        hours = _lookback_hours(args.hours if args.hours is not None else fetch_cfg["lookback_hours"])
        queue_name = args.queue or publish_cfg["queue"]

        publisher = None
        if not args.dry_run:
            redis_url = args.redis or publish_cfg.get("redis_url")
            if not redis_url:
                raise ConfigError("No redis URL given: pass --redis or set REDIS_URL")
            publisher = RedisQueue.from_url(redis_url, queue_name)

        count = run_pipeline(settings, index, granularity, hours, publisher=publisher)
    except OutcomeFeedError as e:
        logger.error(f"Outcome feed failed: {e}")
        return 1

    logger.info(f"Done: {count} {index.value} outcomes ({hours}h, {granularity.value})"
                + ("" if args.dry_run else f" -> '{queue_name}'"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
