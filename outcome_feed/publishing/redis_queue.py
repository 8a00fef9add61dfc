"""Append outcome batches to a Redis list."""

import logging
from typing import Iterable

import redis

from ..exceptions import QueueError
from ..ingestion.normalize import OutcomeRecord

logger = logging.getLogger(__name__)


class RedisQueue:
    """A named Redis list that receives whole outcome batches.

    Each batch goes out as a single RPUSH so readers never observe it
    half-appended.
    """

    def __init__(self, client: redis.Redis, name: str):
        self.client = client
        self.name = name

    @classmethod
    def from_url(cls, url: str, name: str) -> "RedisQueue":
        try:
            client = redis.Redis.from_url(url)
        except ValueError as e:
            raise QueueError(f"Invalid redis URL '{url}': {e}") from e
        return cls(client, name)

    def publish(self, records: Iterable[OutcomeRecord]) -> int:
        """RPUSH every record as JSON. Returns the list length after the push."""
        payload = [r.to_json() for r in records]
        if not payload:
            logger.info(f"No outcomes to publish to '{self.name}'")
            return 0

        try:
            length = self.client.rpush(self.name, *payload)
        except redis.exceptions.RedisError as e:
            raise QueueError(f"RPUSH to '{self.name}' failed: {e}",
                             details={"queue": self.name, "records": len(payload)}) from e

        logger.info(f"Published {len(payload)} outcomes to '{self.name}' (length now {length})")
        return length
