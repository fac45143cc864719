from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from loguru import logger

from flowycart.domain.errors import FlowycartError

P = ParamSpec("P")
R = TypeVar("R")


def log_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Log any exception raised by the decorated callable, then re-raise it.

    SDK errors are expected outcomes for the caller to handle and are logged
    at WARNING; anything else is a bug or an unexpected library failure and
    is logged at ERROR. The exception itself is never altered.

    Usage::

        @log_errors
        def execute(self, query: str) -> dict: ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except FlowycartError as exc:
            logger.warning(f"[{func.__qualname__}] {type(exc).__name__}: {exc}")
            raise
        except Exception as exc:
            logger.error(f"[{func.__qualname__}] {type(exc).__name__}: {exc}")
            raise

    return wrapper
