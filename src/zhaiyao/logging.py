import functools
import logging
import sys

from pythonjsonlogger.json import JsonFormatter

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s %(dd.trace_id)s %(dd.span_id)s"
)


@functools.cache
def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configures structured JSON logging on stdout for the service.

    Every record carries timestamp, level, logger name and message, plus the
    Datadog trace and span ids injected by ddtrace when tracing is active.
    The root logger and the Uvicorn loggers share one stream handler so
    request logs and application logs come out in the same shape.

    The configuration is applied once per process; later calls return the
    already configured root logger.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(JsonFormatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [stream_handler]

    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        u_logger = logging.getLogger(logger_name)
        u_logger.setLevel(level)
        u_logger.handlers = [stream_handler]
        u_logger.propagate = False

    return root_logger
