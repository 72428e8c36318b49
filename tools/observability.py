"""Observability helpers for instrumenting wardrobe operations."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from closet_app.logging_config import ensure_correlation_id, get_logger, log_event
from logic.validation import validation_failure

LOGGER = get_logger(__name__)
F = TypeVar("F", bound=Callable[..., Any])


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _validate_argument(
    func: Callable[..., Any],
    input_model: type[BaseModel],
    argument: str,
    args: tuple,
    kwargs: dict,
) -> tuple[tuple, dict]:
    """Validate one bound argument of ``func`` against ``input_model``.

    Mappings and model instances are validated as a whole and replaced by the
    model. Any other value is validated as the model field named ``argument``
    and replaced by the cleaned field value.
    """

    bound = inspect.signature(func).bind(*args, **kwargs)
    raw = bound.arguments[argument]
    if isinstance(raw, (Mapping, BaseModel)):
        bound.arguments[argument] = input_model.model_validate(raw)
    else:
        validated = input_model.model_validate({argument: raw})
        bound.arguments[argument] = getattr(validated, argument)
    return bound.args, bound.kwargs


def instrument_operation(
    operation: str,
    level: int = logging.DEBUG,
    input_model: type[BaseModel] | None = None,
    argument: str | None = None,
    on_validation_error: Callable[[ValidationError], Any] | None = None,
) -> Callable[[F], F]:
    """Wrap a sync or async callable to emit structured start/finish/failure logs.

    With ``input_model`` the parameter named ``argument`` is validated before
    the call. A rejected input logs ``<operation>_rejected``; the wrapper then
    returns ``on_validation_error(exc)`` or re-raises when no fallback is set.
    """

    if input_model is not None and argument is None:
        raise ValueError("instrument_operation needs 'argument' together with 'input_model'")

    def decorator(func: F) -> F:
        def _prepare(args: tuple, kwargs: dict, correlation_id: str) -> tuple[tuple, dict]:
            if input_model is None:
                return args, kwargs
            try:
                return _validate_argument(func, input_model, argument, args, kwargs)
            except ValidationError as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    f"{operation}_rejected",
                    correlation_id=correlation_id,
                    **validation_failure(operation, exc),
                )
                raise

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                correlation_id = ensure_correlation_id()
                try:
                    args, kwargs = _prepare(args, kwargs, correlation_id)
                except ValidationError as exc:
                    if on_validation_error:
                        return on_validation_error(exc)
                    raise
                start = time.perf_counter()
                log_event(LOGGER, level, "operation_started", operation=operation, correlation_id=correlation_id)
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "operation_failed",
                        operation=operation,
                        correlation_id=correlation_id,
                        duration_ms=_elapsed_ms(start),
                        exc_info=True,
                    )
                    raise
                log_event(
                    LOGGER,
                    level,
                    "operation_completed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                )
                return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            correlation_id = ensure_correlation_id()
            try:
                args, kwargs = _prepare(args, kwargs, correlation_id)
            except ValidationError as exc:
                if on_validation_error:
                    return on_validation_error(exc)
                raise
            start = time.perf_counter()
            log_event(LOGGER, level, "operation_started", operation=operation, correlation_id=correlation_id)
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "operation_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                level,
                "operation_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["instrument_operation"]
