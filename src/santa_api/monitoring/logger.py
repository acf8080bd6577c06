import json
import sys
import traceback

import loguru
from fastapi import Request
from fastapi import Response
from loguru import logger

# Request/response headers that must never reach the log sinks
REDACTED_HEADERS = {"authorization", "cookie", "set-cookie"}


# Loggers configuration runs at the start of the application -- src/santa_api/__init__.py
def configure_logger(level: str = "DEBUG") -> None:
    """
    Configure the loguru stdout sink.

    Args:
        level: Minimum level written to stdout
    """
    logger.remove()  # remove the default logger

    logger.add(
        sink=sys.stdout,
        level=level,
        diagnose=False,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <bold><white>{message}</white></bold> | <dim>{extra}</dim> {stacktrace}",
        filter=process_log_record,
    )


def process_log_record(record: "loguru.Record") -> "loguru.Record":
    r"""
    Inject transformed metadata into each log record before they are passed to the formatter.

    1. Serialize the "extra" field to JSON so that it renders on one line.
    2. For error logs, add a traceback with \r instead of \n so that log collectors do not
       split the traceback into multiple log events.
    """
    extra = record["extra"]

    if extra:
        record["extra"] = json.dumps(extra, default=str)

    record["stacktrace"] = ""
    if record["exception"]:
        err = record["exception"]
        stacktrace = get_formatted_stacktrace(err, replace_newline_character_with_carriage_return=True)
        record["stacktrace"] = stacktrace

    return record


def get_formatted_stacktrace(loguru_record_exception, replace_newline_character_with_carriage_return: bool) -> str:
    """Get the formatted stacktrace for the current exception."""
    exc_type, exc_value, exc_traceback = loguru_record_exception
    stacktrace_: list[str] = traceback.format_exception(exc_type, exc_value, exc_traceback)
    stacktrace: str = "".join(stacktrace_)
    if replace_newline_character_with_carriage_return:
        stacktrace = stacktrace.replace("\n", "\r")
    return stacktrace


def _safe_headers(headers) -> dict:
    return {k: ("[REDACTED]" if k.lower() in REDACTED_HEADERS else v) for k, v in headers.items()}


def log_request_info(request: Request):
    """Log the request info. Bodies are never logged: they carry wishes and addresses."""
    request_info = {
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params.items()),
        "path_params": dict(request.path_params.items()),
        "headers": _safe_headers(request.headers),
        "client": str(request.client),
    }
    logger.debug("Request received", http_request=request_info)


def log_response_info(response: Response):
    """Log the response info."""
    response_info = {
        "status_code": response.status_code,
        "headers": _safe_headers(response.headers),
    }
    logger.debug("Response sent", http_response=response_info)
