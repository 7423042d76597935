import functools
from typing import Any, Optional

from fastapi.responses import JSONResponse

from src.core.exceptions import ZooApiError
from src.utils.logging import get_logger

logger = get_logger(__name__)


def envelope(message: str, **payload: Any) -> dict:
    return {"success": True, "message": message, **payload}


def error_response(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def handle_route_errors(failure_message: str):
    """
    Wrap a route so that unexpected exceptions become a 500 envelope.

    ``ZooApiError`` subclasses pass through to the registered exception
    handler and keep their own status code.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except ZooApiError:
                raise
            except Exception as e:
                logger.error(f"{failure_message}: {e}")
                return error_response(500, failure_message, str(e))

        return wrapper

    return decorator
