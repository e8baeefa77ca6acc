import logging
import sys

from loguru import logger


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    logging.root.handlers = [_InterceptHandler()]
    logging.root.setLevel(level)
    for name in ('uvicorn', 'uvicorn.error'):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def log_access(client_ip: str, method: str, path: str, status_code: int, elapsed_ms: float, client_agent: str) -> None:
    """One combined-log style line per request."""
    logger.info(
        '{} "{} {}" {} {:.1f}ms "{}"',
        client_ip,
        method,
        path,
        status_code,
        elapsed_ms,
        client_agent,
    )
