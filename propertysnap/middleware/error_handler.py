# middleware/error_handler.py
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import traceback
from typing import Callable

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, message: str, request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "message": message,
            "path": str(request.url.path)
        }
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware for the FastAPI application.

    Failures on a cache miss path reach here untouched: the memory cache never
    swallows database errors.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        try:
            response = await call_next(request)
            return response

        except HTTPException as e:
            # Let FastAPI handle HTTP exceptions normally
            raise e

        except ValueError as e:
            logger.warning(f"Validation error on {request.url}: {str(e)}")
            return _error(400, "Validation Error", str(e), request)

        except (ConnectionError, ConnectionFailure) as e:
            # MongoDB/Redis unreachable
            logger.error(f"Connection error on {request.url}: {str(e)}")
            return _error(503, "Service Unavailable", "Database connection error", request)

        except Exception as e:
            logger.error(f"Unexpected error on {request.url}: {str(e)}")
            logger.error(f"Traceback: {traceback.format_exc()}")
            return _error(500, "Internal Server Error", "An unexpected error occurred", request)
