from __future__ import annotations

import traceback
from typing import Any

from stream_alert.errors import AppError


def _format_tail(exc: BaseException, *, limit: int = 6) -> str:
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return "".join(tb[-limit:])


def log_and_wrap(
    exc: BaseException,
    module_exc_cls: type[AppError],
    log,  # loguru logger-like
    context: dict[str, Any] | None = None,
) -> AppError:
    """Log a short traceback of *exc* and raise it wrapped in *module_exc_cls*."""
    formatted_tb = _format_tail(exc)
    log.opt(exception=exc).error("{}", formatted_tb)
    wrapped = module_exc_cls(str(exc), context=context or {})
    raise wrapped from exc
