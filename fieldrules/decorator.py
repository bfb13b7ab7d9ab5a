# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

# fieldrules/decorator.py

import asyncio
import concurrent.futures as _cf
import contextvars as _ctxvars
import functools
import inspect
import logging
from typing import Any, Callable, Optional

import anyio

from .exceptions import ValidationError
from .validation import ValidationResult, Validator, get_validator

logger = logging.getLogger(__name__)

# Sentinel object to detect if a parameter was provided by the user
_sentinel = object()


def _handler_takes_error(handler: Callable) -> bool:
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return True
    positional = (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
        inspect.Parameter.VAR_POSITIONAL,
    )
    return any(param.kind in positional for param in signature.parameters.values())


def guard(
    func: Optional[Callable] = None,
    *,
    on_invalid: Any = _sentinel,
    validator: Optional[Validator] = None,
):
    """
    Validate a function's arguments before the function runs.

    Every bound argument whose type has declared constraints is validated;
    violations from all arguments are merged into one ``ValidationError``.
    Arguments of undeclared types (and ``None``) pass through untouched.

    :param on_invalid: Optional. Determines the behaviour when validation
                       fails. A callable is invoked (with the
                       ``ValidationError`` if it accepts an argument) and its
                       result returned; async handlers are awaited. Any other
                       value is returned directly. If not provided, the
                       ``ValidationError`` is raised.
    :param validator: Optional. The ``Validator`` to use. Defaults to the
                      process-wide validator.

    .. code-block:: python

        @guard
        def create_user(user: User) -> None: ...

        @guard(on_invalid=lambda error: {"errors": error.messages})
        def create_user_api(user: User): ...
    """

    def decorator(func: Callable):
        signature = inspect.signature(func)

        def _validate_arguments(args, kwargs) -> Optional[ValidationError]:
            active = validator or get_validator()
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()

            combined = ValidationResult()
            for name, value in bound.arguments.items():
                if value is None or not active.registry.is_registered(type(value)):
                    continue
                combined.merge(active.check(value))

            if combined.valid:
                return None
            logger.debug(
                "Rejected call to %s with %d violation(s)",
                func.__qualname__,
                len(combined.violations),
            )
            return ValidationError(combined, target=func.__qualname__)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            """Wrapper for synchronous functions."""
            error = _validate_arguments(args, kwargs)
            if error is not None:
                return _handle_invalid_sync(error)
            return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            """Wrapper for asynchronous functions."""
            error = _validate_arguments(args, kwargs)
            if error is not None:
                return await _handle_invalid(error)
            return await func(*args, **kwargs)

        async def _handle_invalid(error: ValidationError):
            """Executes the user-supplied `on_invalid` handler or raises by default."""

            if on_invalid is _sentinel:
                raise error

            # Static value supplied (e.g. None/False)
            if not callable(on_invalid):
                return on_invalid

            call_args = (error,) if _handler_takes_error(on_invalid) else ()
            outcome = on_invalid(*call_args)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome

        def _handle_invalid_sync(error: ValidationError):
            if on_invalid is _sentinel:
                raise error
            if not inspect.iscoroutinefunction(on_invalid):
                if not callable(on_invalid):
                    return on_invalid
                call_args = (error,) if _handler_takes_error(on_invalid) else ()
                return on_invalid(*call_args)

            # Async handler from a sync call site: drive it on a private loop.
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                return anyio.run(_handle_invalid, error)

            # A loop is already running in this thread; use a worker thread so
            # the wrapper keeps its sync contract. Copy contextvars across.
            ctx = _ctxvars.copy_context()
            with _cf.ThreadPoolExecutor(max_workers=1) as executor:
                future = executor.submit(lambda: ctx.run(anyio.run, _handle_invalid, error))
                return future.result()

        if inspect.iscoroutinefunction(func):
            wrapper = async_wrapper
        else:
            wrapper = sync_wrapper

        wrapper.__fieldrules_guarded__ = True
        return wrapper

    # Dual syntax: @guard vs @guard(...)
    if func is not None:
        return decorator(func)
    return decorator


__all__ = ["guard"]
