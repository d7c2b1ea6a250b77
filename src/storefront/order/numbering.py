"""Order number generation.

Order numbers look like ``QH-20250110-00123``: prefix, UTC date of
generation, five random digits. Five digits give 100,000 numbers per day, so
uniqueness is checked against persisted orders and the number regenerated on
collision. The unique constraint on ``Order.order_number`` remains the final
guard for races between the check and the insert.
"""

import secrets
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from storefront.errors import OrderNumberExhaustedError, PersistenceError

logger = structlog.get_logger(__name__)

RANDOM_SPACE = 100_000


def generate_order_number(prefix: str = "QH", now: datetime | None = None) -> str:
    """Return ``<prefix>-<YYYYMMDD>-<NNNNN>`` for ``now`` (defaults to the current UTC time)."""
    now = now or datetime.now(UTC)
    if now.tzinfo is not None:
        now = now.astimezone(UTC)
    return f"{prefix}-{now:%Y%m%d}-{secrets.randbelow(RANDOM_SPACE):05d}"


def allocate_order_number(
    is_taken: Callable[[str], bool],
    prefix: str = "QH",
    max_attempts: int = 10,
    now: datetime | None = None,
) -> str:
    """Generate order numbers until ``is_taken`` reports a free one.

    Raises:
        OrderNumberExhaustedError: every attempt collided.
        PersistenceError: the uniqueness check itself failed.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = generate_order_number(prefix, now)
        try:
            taken = is_taken(candidate)
        except Exception as exc:
            logger.error("Order number uniqueness check failed", order_number=candidate, error=str(exc))
            raise PersistenceError() from exc

        if not taken:
            return candidate

        logger.info("Order number collision, regenerating", order_number=candidate, attempt=attempt)

    raise OrderNumberExhaustedError(max_attempts)
