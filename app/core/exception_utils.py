import functools
import logging
from typing import Any, Callable, Optional, Type, Union

from sqlalchemy.exc import OperationalError

from app.core.exceptions import AppException, InternalServerError

logger = logging.getLogger(__name__)


def raise_for_status(
    condition: bool,
    exception: Type[AppException],
    detail: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Raise `exception` when `condition` holds.

    Extra keyword arguments (resource_type, resource_id, ...) are forwarded to
    the exception constructor; unset ones are dropped.
    """
    if not condition:
        return
    params = {key: value for key, value in kwargs.items() if value is not None}
    raise exception(detail, **params)


def handle_exceptions(
    default_exception: Union[Type[AppException], AppException] = InternalServerError,
    message: Optional[str] = None,
) -> Callable:
    """
    Decorator for repository coroutines.

    - AppException subclasses propagate as-is.
    - OperationalError (lost connection, statement timeout) propagates
      unchanged; nothing is retried here.
    - Anything else is logged and re-raised as `default_exception`.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except (AppException, OperationalError):
                raise
            except Exception as exc:
                logger.error(
                    f"Unhandled error in {func.__qualname__}: {exc}",
                    exc_info=True,
                    extra={"operation": func.__qualname__},
                )
                if isinstance(default_exception, AppException):
                    raise default_exception from exc
                raise default_exception(message) from exc

        return wrapper

    return decorator
