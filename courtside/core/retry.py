import logging
import time
from typing import Callable, TypeVar

from courtside.core.exceptions import CollaboratorError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_call(
    fn: Callable[[], T],
    attempts: int = 3,
    backoff_seconds: float = 0.2,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Calls ``fn`` until it succeeds or ``attempts`` calls have raised
    CollaboratorError. The delay doubles after every failure.
    Only use this for reads: a retried write could be applied twice.
    """
    delay = backoff_seconds
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except CollaboratorError as e:
            if attempt == attempts:
                raise
            logger.warning("Read failed (attempt %d/%d): %s; retrying in %.2fs", attempt, attempts, e, delay)
            sleep(delay)
            delay *= 2
    raise CollaboratorError("retry_call needs at least one attempt")
