import logging
import sys
from contextvars import ContextVar, Token
from typing import Final
from logging import LoggerAdapter, LogRecord
from typing_extensions import override
from starlette.requests import Request

_LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s %(name)s :: %(message)s [req=%(request_id)s]"
)
_NO_REQUEST: Final[str] = "-"
_UVICORN_LOGGERS: Final[tuple[str, ...]] = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Set by CorrelationIdMiddleware for the lifetime of one request
_request_id: ContextVar[str] = ContextVar("request_id", default=_NO_REQUEST)


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


def current_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """
    Stamps records with the id of the request being served,
    so module-level loggers in services and repos carry it too.
    """

    @override
    def filter(self, record: LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = current_request_id()
        return True


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Send root and uvicorn output through one stdout handler.
    Accepts a numeric level or a name such as "debug"; unknown names mean INFO.
    """
    level = _resolve_level(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    # uvicorn installs its own handlers; replace them so lines are not doubled
    for name in _UVICORN_LOGGERS:
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.setLevel(level)
        uv_logger.addHandler(handler)
        uv_logger.propagate = False


def get_logger(
    name: str,
    request: Request | None = None
) -> LoggerAdapter[logging.Logger]:
    """
    Logger for `name`. Pass the request when logging outside the
    middleware's context (exception handlers) to pin its id explicitly.
    """
    extra: dict[str, str] = {}
    if request is not None:
        extra["request_id"] = getattr(request.state, "correlation_id", current_request_id())
    return LoggerAdapter(logging.getLogger(name), extra)
