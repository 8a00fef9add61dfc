"""Queue publishing for outcome records."""

from .redis_queue import RedisQueue
