"""
Dramatiq broker configuration.

Redis broker for the distribution actors. Import this module before the
task modules so the actors bind to Redis:

    dramatiq jobs.broker jobs.tasks.daily_rewards
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import CurrentMessage, Retries, ShutdownNotifications
from loguru import logger

from app.config.settings import settings


def create_broker() -> RedisBroker:
    """Build the Redis broker with the worker middleware."""
    redis_broker = RedisBroker(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password or None,
        db=settings.redis_db,
    )
    redis_broker.add_middleware(ShutdownNotifications())
    redis_broker.add_middleware(CurrentMessage())
    redis_broker.add_middleware(
        Retries(
            max_retries=3,
            min_backoff=1000,  # 1 second
            max_backoff=60000,  # 1 minute
        )
    )
    return redis_broker


broker = create_broker()
dramatiq.set_broker(broker)

logger.info(
    f"Dramatiq broker initialized: "
    f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
)
