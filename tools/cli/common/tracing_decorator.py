import functools

from common.logging_config import logger


def trace():
    """Log entry, exit and failure of the decorated callable at debug level."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"-> {func.__qualname__}")
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.debug(f"<- {func.__qualname__} raised {type(e).__name__}: {e}")
                raise
            logger.debug(f"<- {func.__qualname__}")
            return result

        return wrapper

    return decorator
