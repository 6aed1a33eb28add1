import atexit
import json
import logging
import os
import queue
import sys
import time
from contextlib import suppress
from datetime import datetime
from functools import wraps
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Dict, Optional

from tqdm import tqdm

LOGGER_NAME = "wistiaembed"


class JsonFormatter(logging.Formatter):
    """
    A custom formatter that outputs logs in JSON format.
    """

    def format(self, record):
        log_record = {
            "timestamp": f"{self.formatTime(record, self.datefmt)}.{int(record.msecs):03d}",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)
        if hasattr(record, "kv_pairs"):
            log_record.update(record.kv_pairs)
        return json.dumps(log_record, ensure_ascii=False)


class KVFormatter(logging.Formatter):
    """
    A custom formatter that outputs logs in Key-Value pair format.
    Example: [Video=abc123][Type=api][Groups=general,ga] Message
    """

    def format(self, record):
        kv_string = ""
        kv_pairs = getattr(record, "kv_pairs", None)
        if kv_pairs:
            kv_string = "".join([f"[{k}={v}]" for k, v in kv_pairs.items()])
        ts = self.formatTime(record, self.datefmt)
        return f"{ts}.{int(record.msecs):03d} - {record.levelname} - {kv_string} {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """A logging handler that writes via tqdm.write to stderr to avoid breaking progress bars."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
        except Exception:  # pragma: no cover (best-effort logging)
            self.handleError(record)


def setup_logging(
    log_json: bool = False,
    debug_mode: bool = False,
    log_kv: bool = False,
    log_dir: Optional[str] = None,
):
    """
    Sets up the logging configuration for command line use.

    Library code only ever calls :func:`get_logger`; handlers are installed
    here so that embedding applications keep control of their own logging.

    Args:
        log_json (bool): If True, logs will be output in JSON format.
        debug_mode (bool): If True, sets the log level to DEBUG.
        log_kv (bool): If True, logs will be output in Key-Value pair format.
        log_dir (str): If given, logs are also written to a timestamped file there.
    """
    logger = get_logger()
    if getattr(logger, "_queue_listener", None) is not None:
        return logger

    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    datefmt = "%Y-%m-%d %H:%M:%S"
    if log_json:
        formatter: logging.Formatter = JsonFormatter(datefmt=datefmt)
    elif log_kv:
        formatter = KVFormatter(datefmt=datefmt)
    else:
        fmt = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    console_handler = TqdmLoggingHandler()
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    file_handler: Optional[logging.Handler] = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_filename = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3] + ".log"
        file_handler = logging.FileHandler(
            os.path.join(log_dir, log_filename), encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Queue-based logging to avoid handler contention and ensure ordering
    q: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
    qh = QueueHandler(q)
    logger.addHandler(qh)
    logger.propagate = False

    listener = QueueListener(q, *handlers, respect_handler_level=True)
    listener.start()
    logger._queue_listener = listener  # type: ignore[attr-defined]
    logger._console_handler = console_handler  # type: ignore[attr-defined]
    logger._file_handler = file_handler  # type: ignore[attr-defined]

    if not debug_mode:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    atexit.register(shutdown_logging)
    return logger


def shutdown_logging() -> None:
    """Stop logging queue listener and close handlers safely."""
    wistia_logger = logging.getLogger(LOGGER_NAME)

    listener = getattr(wistia_logger, "_queue_listener", None)
    if listener is not None:
        with suppress(Exception):
            listener.stop()
        wistia_logger._queue_listener = None  # type: ignore[attr-defined]

    for handler_attr in ("_console_handler", "_file_handler"):
        handler = getattr(wistia_logger, handler_attr, None)
        if handler is not None:
            with suppress(Exception):
                handler.flush()
            with suppress(Exception):
                handler.close()
            setattr(wistia_logger, handler_attr, None)

    for handler in list(wistia_logger.handlers):
        with suppress(Exception):
            handler.flush()
        with suppress(Exception):
            handler.close()
        wistia_logger.removeHandler(handler)
    wistia_logger.propagate = True


class KVLogger(logging.Logger):
    """
    A custom logger that provides methods for logging with KV pairs.
    """

    def _log_kv(
        self, level, msg, kv_pairs: Optional[Dict[str, Any]] = None, *args, **kwargs
    ):
        if kv_pairs is None:
            kv_pairs = {}
        kwargs["extra"] = {"kv_pairs": kv_pairs}
        self.log(level, msg, *args, **kwargs)

    def kv_debug(self, msg, kv_pairs: Optional[Dict[str, Any]] = None, *args, **kwargs):
        self._log_kv(logging.DEBUG, msg, kv_pairs, *args, **kwargs)

    def kv_info(self, msg, kv_pairs: Optional[Dict[str, Any]] = None, *args, **kwargs):
        self._log_kv(logging.INFO, msg, kv_pairs, *args, **kwargs)

    def kv_warning(
        self, msg, kv_pairs: Optional[Dict[str, Any]] = None, *args, **kwargs
    ):
        self._log_kv(logging.WARNING, msg, kv_pairs, *args, **kwargs)

    def kv_error(self, msg, kv_pairs: Optional[Dict[str, Any]] = None, *args, **kwargs):
        self._log_kv(logging.ERROR, msg, kv_pairs, *args, **kwargs)


def time_log(logger_instance: logging.Logger):
    """A decorator to log execution time of a call at debug level.

    Uses time.monotonic() for reliable duration measurement.
    """

    def decorator(func):
        def _resolve_name(args):
            if args and hasattr(args[0], "__dict__") and hasattr(args[0].__class__, func.__name__):
                return f"{args[0].__class__.__name__}.{func.__name__}"
            return func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs):
            log_name = _resolve_name(args)
            start_time = time.monotonic()
            try:
                return func(*args, **kwargs)
            finally:
                duration = time.monotonic() - start_time
                if isinstance(logger_instance, KVLogger):
                    logger_instance.kv_debug(
                        f"--- Finished: {log_name}. Duration: {duration:.3f} seconds ---",
                        kv_pairs={
                            "Event": "Finish",
                            "Function": log_name,
                            "Duration": f"{duration:.3f}s",
                        },
                    )
                else:
                    logger_instance.debug(
                        f"--- Finished: {log_name}. Duration: {duration:.3f} seconds ---"
                    )

        return wrapper

    return decorator


def log_exception(exc: BaseException, logger_instance: Optional[logging.Logger] = None) -> None:
    """Log an exception together with every exception chained beneath it."""

    target = logger_instance or get_logger()
    depth = 0
    current: Optional[BaseException] = exc
    while current is not None:
        target.error(
            "%s%s: %s",
            "caused by " if depth else "",
            type(current).__name__,
            current,
            exc_info=(type(current), current, current.__traceback__) if depth == 0 else None,
        )
        depth += 1
        current = current.__cause__


def get_logger() -> KVLogger:
    """
    Returns the 'wistiaembed' logger instance.

    No handlers are installed here; records propagate to the root logger
    until :func:`setup_logging` is called. A plain logger created earlier by
    the host application (``dictConfig``, ``getLogger``) is upgraded in place;
    KVLogger only adds methods, so its handlers and level are kept.
    """
    previous = logging.getLoggerClass()
    logging.setLoggerClass(KVLogger)
    try:
        logger = logging.getLogger(LOGGER_NAME)
    finally:
        logging.setLoggerClass(previous)
    if not isinstance(logger, KVLogger):
        logger.__class__ = KVLogger
    return logger  # type: ignore[return-value]


logger = get_logger()
