import sys
import traceback
from typing import Any

from uvicorn.server import logger

from util.config import config

LEVELS = {"trace": 0, "debug": 1, "info": 2, "warn": 3, "warning": 3, "error": 4}


def _should_log(level: str) -> bool:
    if config.log_level == "local":
        return True  # we always log in local context
    current_level = LEVELS.get(config.log_level, 2)  # default to info
    request_level = LEVELS.get(level.lower(), 2)
    return request_level >= current_level


def _format_context(context: dict[str, Any]) -> str | None:
    if not context:
        return None
    return ", ".join(f"{key} = {value}" for key, value in context.items())


def _format_args(*args: Any, **context: Any) -> tuple[str, list[Exception]]:
    exceptions = []
    formatted_parts = []

    for arg in args:
        if isinstance(arg, Exception):
            exceptions.append(arg)
            formatted_parts.append(f"! {type(arg).__name__}: {arg}")
        elif hasattr(arg, "__dict__") and not isinstance(arg, type):
            formatted_parts.append(f"{type(arg).__name__}:\n```\n{repr(arg)}\n```")
        else:
            formatted_parts.append(str(arg))

    if context_line := _format_context(context):
        formatted_parts.append(f"[{context_line}]")

    # edge: nothing to print
    if not formatted_parts:
        return "", exceptions

    # edge: a single line
    if len(formatted_parts) == 1:
        return formatted_parts[0], exceptions

    # the head goes on the first line, the rest hangs below it as a tree
    head, *body = formatted_parts
    if len(body) == 1:
        return f"{head}\n └─ {body[0]}", exceptions
    branches = "".join(f"\n ├─ {part}" for part in body[:-1])
    return f"{head}{branches}\n └─ {body[-1]}", exceptions


def _format_trace(exception: Exception, indent: str) -> str | None:
    trace = exception.__traceback__
    if not trace:
        return None
    return "".join(f"{indent}{line.strip()}\n" for line in traceback.format_tb(trace)).rstrip()


def _log_message(level: str, message: str, exceptions: list[Exception]) -> str:
    if not _should_log(level) and not exceptions:
        return message

    # local execution prints straight to the console
    if config.log_level == "local":
        print(f"[{level[0]}] {message}")
        for exception in exceptions:
            print(f" ‼  Message: {exception}", file = sys.stderr)
            if trace := _format_trace(exception, "    "):
                print(trace, file = sys.stderr)
        return message

    try:
        if _should_log(level):
            match level:
                case "TRACE" | "DEBUG":
                    logger.debug(message)
                case "INFO":
                    logger.info(message)
                case "WARN":
                    logger.warning(message)
                case "ERROR":
                    logger.error(message)
        for exception in exceptions:
            logger.error(f"Message: {exception}")
            if trace := _format_trace(exception, ""):
                logger.error(f"Details:\n └─ {trace}")
    except Exception:
        # the server logger is unusable, fall back to the console
        if _should_log(level):
            print(f"[{level[0]}] {message}")
        for exception in exceptions:
            print(f" ‼  Message: {exception}", file = sys.stderr)
    return message


def t(*args: Any, **context: Any) -> str:
    message, exceptions = _format_args(*args, **context)
    return _log_message("TRACE", message, exceptions)


def d(*args: Any, **context: Any) -> str:
    message, exceptions = _format_args(*args, **context)
    return _log_message("DEBUG", message, exceptions)


def i(*args: Any, **context: Any) -> str:
    message, exceptions = _format_args(*args, **context)
    return _log_message("INFO", message, exceptions)


def w(*args: Any, **context: Any) -> str:
    message, exceptions = _format_args(*args, **context)
    return _log_message("WARN", message, exceptions)


def e(*args: Any, **context: Any) -> str:
    message, exceptions = _format_args(*args, **context)
    return _log_message("ERROR", message, exceptions)
