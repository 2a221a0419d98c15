"""
Base classes and utilities for the storefront service layer.

Services report expected failures as values through ServiceResult instead of
raising, and share logging/timing behaviour through BaseService.
"""

import inspect
import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if the operation succeeded
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Message meant for the end user (present if ok=False)
        cause: Verbatim text of the collaborator error behind a failure, if any

    Examples:
        >>> result = validator.validate(order_request)
        >>> if not result.ok:
        ...     return Response({"detail": result.error_detail}, 400)

        >>> result = service_err("persistence_failed", "Please try again.", cause="connection refused")
        >>> result.to_dict()["error"]["cause"]
        'connection refused'
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    cause: Optional[str] = None

    def map(self, func: Callable[[T], Any]) -> "ServiceResult":
        """Transform the success value, passing failures through untouched."""
        if self.ok:
            try:
                return service_ok(func(self.value))
            except Exception as e:
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
        return self

    def flat_map(self, func: Callable[[T], "ServiceResult"]) -> "ServiceResult":
        """Chain another ServiceResult-returning operation on success."""
        if self.ok:
            return func(self.value)
        return self

    def to_dict(self) -> dict:
        """
        Convert to a JSON-friendly dictionary.

        Returns:
            Dictionary with 'success' and either 'data' or 'error'
        """
        if self.ok:
            return {"success": True, "data": self.value}
        error = {"code": self.error, "message": self.error_detail}
        if self.cause:
            error["cause"] = self.cause
        return {"success": False, "error": error}


def service_ok(value: T = None) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Example:
        >>> return service_ok(summary)
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", cause: Optional[str] = None) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "validation_error", "persistence_failed")
        error_detail: Human-readable message, defaults to the error code
        cause: Underlying collaborator error text, kept verbatim

    Example:
        >>> return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, cause=cause)


class BaseService:
    """
    Base class for storefront services.

    Provides:
    - A logger named after the concrete class
    - A timing decorator that understands ServiceResult and coroutines

    Usage:
        class PricingService(BaseService):
            @BaseService.log_performance
            def summarize_result(self, items):
                ...
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def _log_outcome(service, method_name: str, result: Any, started: float) -> None:
        took = (time.time() - started) * 1000
        if not isinstance(result, ServiceResult):
            service.logger.info(f"{method_name} finished in {took:.2f}ms")
        elif result.ok:
            service.logger.info(f"{method_name} succeeded in {took:.2f}ms")
        else:
            service.logger.warning(f"{method_name} returned '{result.error}' after {took:.2f}ms")

    @staticmethod
    def _log_crash(service, method_name: str, exc: Exception, started: float) -> None:
        took = (time.time() - started) * 1000
        service.logger.error(f"{method_name} crashed after {took:.2f}ms: {exc}", exc_info=True)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Time a service method and log how it ended.

        Plain and ``async def`` methods are both supported. Exceptions are
        logged with their traceback and propagate unchanged.
        """

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def timed_coroutine(self, *args, **kwargs):
                started = time.time()
                name = f"{self.__class__.__name__}.{func.__name__}"
                self.logger.debug(f"{name} started")
                try:
                    result = await func(self, *args, **kwargs)
                except Exception as e:
                    BaseService._log_crash(self, name, e, started)
                    raise
                BaseService._log_outcome(self, name, result, started)
                return result

            return timed_coroutine

        @wraps(func)
        def timed_call(self, *args, **kwargs):
            started = time.time()
            name = f"{self.__class__.__name__}.{func.__name__}"
            self.logger.debug(f"{name} started")
            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                BaseService._log_crash(self, name, e, started)
                raise
            BaseService._log_outcome(self, name, result, started)
            return result

        return timed_call


class ErrorCodes:
    """Standard error codes used across storefront services."""

    # Cart errors
    CART_EMPTY = "cart_empty"
    INVALID_QUANTITY = "invalid_quantity"
    ITEM_NOT_IN_CART = "item_not_in_cart"

    # Order errors
    ORDER_NOT_FOUND = "order_not_found"
    ORDER_IN_PROGRESS = "order_in_progress"
    PERSISTENCE_FAILED = "persistence_failed"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_INPUT = "invalid_input"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
