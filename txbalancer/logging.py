"""Library-wide logger.

Messages go to stderr through a logger named ``TxBalancer``. Set the ``TXBALANCER_LOG_LEVEL`` environment variable
(e.g. ``DEBUG``) to change its level; otherwise the level is inherited from the root logger.
"""

import logging
import os
from functools import wraps

from pprintpp import pformat

__all__ = ["logger", "log_state"]

_LOG_LEVEL_ENV = "TXBALANCER_LOG_LEVEL"

logger = logging.getLogger("TxBalancer")

_handler = logging.StreamHandler()
_handler.setFormatter(
    logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
)
logger.addHandler(_handler)

if os.getenv(_LOG_LEVEL_ENV):
    logger.setLevel(os.environ[_LOG_LEVEL_ENV].upper())


def _describe(obj, func) -> str:
    return f"{obj.__class__.__name__}.{func.__name__}, state:\n {pformat(vars(obj), indent=2)}"


def log_state(func):
    """Decorator that dumps the state of an object once one of its methods returns.

    The dump is logged at debug level. When the method raises, it is logged at warning level instead and the
    exception propagates.
    """

    @wraps(func)
    def wrapper(obj, *args, **kwargs):
        try:
            output = func(obj, *args, **kwargs)
        except Exception:
            logger.warning(f"Failed: {_describe(obj, func)}")
            raise
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Done: {_describe(obj, func)}")
        return output

    return wrapper
